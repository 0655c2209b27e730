"""
Tests for name-based joint classification.

Rule order matters: "UpperLeg" contains "leg", "LowerArm" contains "arm".
"""

import pytest

from Exp_AutoIK.engine.joint_classifier import (
    BALL,
    HINGE,
    UNIVERSAL,
    UNKNOWN,
    classification_disagreement,
    classify_biomechanical,
    classify_kind,
)


@pytest.mark.parametrize("name, kind", [
    ("LeftKnee", HINGE),
    ("LeftShin", HINGE),
    ("calf_l", HINGE),
    ("LeftForeArm", HINGE),
    ("J_Bip_L_LowerArm", HINGE),
    ("LeftLeg", HINGE),
    ("J_Bip_L_LowerLeg", HINGE),
    ("LeftFoot", UNIVERSAL),
    ("LeftToeBase", UNIVERSAL),
    ("hand_r", UNIVERSAL),
    ("LeftHandThumb1", UNIVERSAL),
    ("LeftUpLeg", BALL),
    ("J_Bip_L_UpperLeg", BALL),
    ("thigh_l", BALL),
    ("LeftShoulder", BALL),
    ("upperarm_l", BALL),
    ("Hips", BALL),
    ("Spine1", BALL),
    ("Head", BALL),
])
def test_classify_kind(name, kind):
    assert classify_kind(name) == kind


def test_hinge_rules_win_over_ball_rules():
    """Hinge patterns are checked before ball patterns"""
    # contains both "elbow" and "shoulder"
    assert classify_kind("ShoulderToElbow") == HINGE
    # contains both "knee" and "hip"
    assert classify_kind("HipKneeHelper") == HINGE


def test_universal_wins_over_ball():
    # "hand" (universal) and "clavicle" (ball)
    assert classify_kind("clavicle_hand_helper") == UNIVERSAL


@pytest.mark.parametrize("name", ["", "Root", "Armature", "LeftArm", "Tail01"])
def test_classify_kind_never_returns_none(name):
    assert classify_kind(name) == UNKNOWN


@pytest.mark.parametrize("name, joint", [
    ("LeftShin", "knee"),
    ("calf_l", "knee"),
    ("J_Bip_L_LowerLeg", "knee"),
    ("LeftForeArm", "elbow"),
    ("lowerarm_r", "elbow"),
    ("Hips", "hip"),
    ("thigh_l", "hip"),
    ("J_Bip_L_UpperLeg", "hip"),
    ("LeftShoulder", "shoulder"),
    ("upperarm_l", "shoulder"),
    ("LeftFoot", "ankle"),
    ("LeftHand", "wrist"),
])
def test_classify_biomechanical(name, joint):
    assert classify_biomechanical(name) == joint


@pytest.mark.parametrize("name", ["", "LeftLeg", "LeftUpLeg", "Spine", "LeftToeBase"])
def test_classify_biomechanical_no_entry(name):
    assert classify_biomechanical(name) is None


def test_case_insensitive():
    assert classify_kind("LEFTFOREARM") == classify_kind("leftforearm") == HINGE
    assert classify_biomechanical("THIGH_L") == "hip"


@pytest.mark.parametrize("name, expected", [
    ("LeftLeg", (HINGE, None)),
    ("LeftUpLeg", (BALL, None)),
    ("LeftToeBase", (UNIVERSAL, None)),
    ("Neck", (BALL, None)),
])
def test_known_disagreements(name, expected):
    """Mixamo names the two classifiers see differently"""
    assert classification_disagreement(name) == expected


@pytest.mark.parametrize("name", [
    "Hips", "LeftFoot", "LeftShin", "LeftForeArm", "LeftHand", "LeftShoulder",
    "LeftArm", "thigh_l", "calf_l", "upperarm_l", "J_Bip_L_UpperLeg", "J_Bip_L_LowerLeg",
])
def test_agreements(name):
    assert classification_disagreement(name) is None
