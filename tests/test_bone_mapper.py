"""
Tests for the name-based role mapper.
"""

import pytest

from Exp_AutoIK.engine.skeleton import make_skeleton
from Exp_AutoIK.rig.bone_mapper import (
    NameBoneMapper,
    REQUIRED_ROLES,
    detect_side,
    fuzzy_role,
    mapped_role_names,
    normalize_bone_name,
)


UNREAL_ROWS = [
    ("root", None, (0, 0, 0)),
    ("pelvis", "root", (0, 95, 0)),
    ("spine_01", "pelvis", (0, 10, 0)),
    ("spine_02", "spine_01", (0, 10, 0)),
    ("spine_03", "spine_02", (0, 10, 0)),
    ("neck_01", "spine_03", (0, 15, 0)),
    ("head", "neck_01", (0, 10, 0)),
]
for _side, _sign in (("l", 1), ("r", -1)):
    UNREAL_ROWS += [
        (f"clavicle_{_side}", "spine_03", (_sign * 5, 10, 0)),
        (f"upperarm_{_side}", f"clavicle_{_side}", (0, 12, 0)),
        (f"lowerarm_{_side}", f"upperarm_{_side}", (0, 25, 0)),
        (f"hand_{_side}", f"lowerarm_{_side}", (0, 25, 0)),
        (f"thigh_{_side}", "pelvis", (_sign * 10, -5, 0)),
        (f"calf_{_side}", f"thigh_{_side}", (0, -40, 0)),
        (f"foot_{_side}", f"calf_{_side}", (0, -40, 0)),
        (f"ball_{_side}", f"foot_{_side}", (0, -5, 10)),
    ]

# 3ds Max biped style - no platform profile, fuzzy rules only
BIPED_ROWS = [
    ("Bip01", None, (0, 0, 0)),
    ("Bip01 Pelvis", "Bip01", (0, 95, 0)),
    ("Bip01 Spine", "Bip01 Pelvis", (0, 10, 0)),
]
for _side, _sign in (("L", 1), ("R", -1)):
    BIPED_ROWS += [
        (f"Bip01 {_side} Clavicle", "Bip01 Spine", (_sign * 5, 10, 0)),
        (f"Bip01 {_side} UpperArm", f"Bip01 {_side} Clavicle", (0, 12, 0)),
        (f"Bip01 {_side} Forearm", f"Bip01 {_side} UpperArm", (0, 25, 0)),
        (f"Bip01 {_side} Hand", f"Bip01 {_side} Forearm", (0, 25, 0)),
        (f"Bip01 {_side} Finger0", f"Bip01 {_side} Hand", (0, 5, 0)),
        (f"Bip01 {_side} Thigh", "Bip01 Pelvis", (_sign * 10, -5, 0)),
        (f"Bip01 {_side} Calf", f"Bip01 {_side} Thigh", (0, -40, 0)),
        (f"Bip01 {_side} Foot", f"Bip01 {_side} Calf", (0, -40, 0)),
        (f"Bip01 {_side} Toe0", f"Bip01 {_side} Foot", (0, -5, 10)),
    ]


def test_normalize_bone_name():
    assert normalize_bone_name("mixamorig:LeftArm") == "leftarm"
    assert normalize_bone_name("Armature|Hips") == "hips"
    assert normalize_bone_name(" Spine ") == "spine"


@pytest.mark.parametrize("name, side", [
    ("leftarm", "left"),
    ("rightupleg", "right"),
    ("thigh_l", "left"),
    ("j_bip_r_hand", "right"),
    ("bip01 l calf", "left"),
    ("hips", None),
    ("spine_01", None),
])
def test_detect_side(name, side):
    assert detect_side(name) == side


@pytest.mark.parametrize("name, role", [
    ("leftupleg", "leftUpperLeg"),
    ("leftleg", "leftLowerLeg"),
    ("rightforearm", "rightLowerArm"),
    ("rightarm", "rightUpperArm"),
    ("leftshoulder", "leftShoulder"),
    ("bip01 r toe0", "rightToeBase"),
    ("pelvis", "hips"),
    ("chest", "chest"),
    ("neck", "neck"),
    ("lefthandindex1", None),
    ("upperarm_twist_01_l", None),
    ("headtop_end", None),
    ("tail", None),
])
def test_fuzzy_role(name, role):
    assert fuzzy_role(name) == role


def test_mixamo_platform(mixamo_bones):
    mapping = NameBoneMapper().map(mixamo_bones)

    assert mapping.complete
    assert mapping.platform_name == "Mixamo"
    assert mapping.bones["leftLowerLeg"].name == "LeftLeg"
    assert mapping.bones["rightUpperArm"].name == "RightArm"
    assert mapping.bones["chest"].name == "Spine2"
    assert set(REQUIRED_ROLES) <= set(mapping.bones)


def test_unreal_platform():
    mapping = NameBoneMapper().map(make_skeleton(UNREAL_ROWS))

    assert mapping.complete
    assert mapping.platform_name == "Unreal"
    assert mapping.bones["leftLowerLeg"].name == "calf_l"
    assert mapping.bones["rightToeBase"].name == "ball_r"
    assert mapping.bones["leftShoulder"].name == "clavicle_l"


def test_fuzzy_only_rig():
    mapping = NameBoneMapper().map(make_skeleton(BIPED_ROWS))

    assert mapping.complete
    assert mapping.platform_name is None
    assert mapping.bones["hips"].name == "Bip01 Pelvis"
    assert mapping.bones["leftLowerLeg"].name == "Bip01 L Calf"
    assert mapping.bones["rightLowerArm"].name == "Bip01 R Forearm"
    assert mapping.bones["rightHand"].name == "Bip01 R Hand"
    assert mapping.bones["leftToeBase"].name == "Bip01 L Toe0"


def test_missing_leg_is_incomplete(mixamo_bones):
    bones = [b for b in mixamo_bones if b.name not in ("RightLeg", "RightFoot", "RightToeBase")]
    mapping = NameBoneMapper().map(bones)

    assert not mapping.complete
    assert "rightLowerLeg" not in mapping.bones


def test_each_bone_used_once(mixamo_bones):
    mapping = NameBoneMapper().map(mixamo_bones)
    uids = [b.uid for b in mapping.bones.values()]
    assert len(uids) == len(set(uids))


def test_mapped_role_names_order(mixamo_bones):
    names = mapped_role_names(NameBoneMapper().map(mixamo_bones))
    assert names[0] == "hips"
    assert names.index("leftUpperLeg") < names.index("rightUpperLeg")
