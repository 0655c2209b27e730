# Exp_AutoIK/rig/bone_mapper.py
"""
Name-based role mapper.

Maps bones to canonical roles ("hips", "leftUpperLeg", "rightHand", ...):

1. Platform profiles - exact names per rig platform (Mixamo, the
   Exploratory standard rig, VRM, Unreal). Names are compared
   case-insensitively after stripping namespaces ("mixamorig:").
   The best-scoring profile names the platform.
2. Fuzzy rules - side marker + body part patterns, for roles no profile
   resolved. First bone (in skeleton order) matching a role wins.

complete is True when REQUIRED_ROLES are all mapped.
"""

import re
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from ..engine.skeleton import BoneMapping, BoneRef

SIDES = ("left", "right")

# Per-side role suffixes ("left" + "UpperLeg" -> "leftUpperLeg")
LIMB_PARTS = (
    "UpperLeg", "LowerLeg", "Foot", "ToeBase",
    "Shoulder", "UpperArm", "LowerArm", "Hand",
)
CENTER_ROLES = ("hips", "spine", "chest", "neck", "head")

CANONICAL_ROLES: Tuple[str, ...] = CENTER_ROLES + tuple(
    side + part for side in SIDES for part in LIMB_PARTS
)

REQUIRED_ROLES: Tuple[str, ...] = (
    "hips",
    "leftUpperLeg", "leftLowerLeg", "rightUpperLeg", "rightLowerLeg",
    "leftUpperArm", "leftLowerArm", "rightUpperArm", "rightLowerArm",
)

# A profile needs this many exact hits to name the platform
PLATFORM_MIN_MATCHES = 10


# =============================================================================
# PLATFORM PROFILES
# =============================================================================
# Side templates: {Side} -> Left/Right, {S} -> L/R, {s} -> l/r

PLATFORM_PROFILES: Dict[str, Dict[str, Dict[str, str]]] = {
    "Mixamo": {
        "center": {
            "hips": "Hips", "spine": "Spine", "chest": "Spine2",
            "neck": "Neck", "head": "Head",
        },
        "side": {
            "UpperLeg": "{Side}UpLeg", "LowerLeg": "{Side}Leg",
            "Foot": "{Side}Foot", "ToeBase": "{Side}ToeBase",
            "Shoulder": "{Side}Shoulder", "UpperArm": "{Side}Arm",
            "LowerArm": "{Side}ForeArm", "Hand": "{Side}Hand",
        },
    },
    "Exploratory": {
        "center": {
            "hips": "Hips", "spine": "Spine", "chest": "Spine2",
            "neck": "NeckLower", "head": "Head",
        },
        "side": {
            "UpperLeg": "{Side}Thigh", "LowerLeg": "{Side}Shin",
            "Foot": "{Side}Foot", "ToeBase": "{Side}ToeBase",
            "Shoulder": "{Side}Shoulder", "UpperArm": "{Side}Arm",
            "LowerArm": "{Side}ForeArm", "Hand": "{Side}Hand",
        },
    },
    "VRM": {
        "center": {
            "hips": "J_Bip_C_Hips", "spine": "J_Bip_C_Spine", "chest": "J_Bip_C_Chest",
            "neck": "J_Bip_C_Neck", "head": "J_Bip_C_Head",
        },
        "side": {
            "UpperLeg": "J_Bip_{S}_UpperLeg", "LowerLeg": "J_Bip_{S}_LowerLeg",
            "Foot": "J_Bip_{S}_Foot", "ToeBase": "J_Bip_{S}_ToeBase",
            "Shoulder": "J_Bip_{S}_Shoulder", "UpperArm": "J_Bip_{S}_UpperArm",
            "LowerArm": "J_Bip_{S}_LowerArm", "Hand": "J_Bip_{S}_Hand",
        },
    },
    "Unreal": {
        "center": {
            "hips": "pelvis", "spine": "spine_01", "chest": "spine_03",
            "neck": "neck_01", "head": "head",
        },
        "side": {
            "UpperLeg": "thigh_{s}", "LowerLeg": "calf_{s}",
            "Foot": "foot_{s}", "ToeBase": "ball_{s}",
            "Shoulder": "clavicle_{s}", "UpperArm": "upperarm_{s}",
            "LowerArm": "lowerarm_{s}", "Hand": "hand_{s}",
        },
    },
}

_SIDE_TOKENS = {
    "left": {"Side": "Left", "S": "L", "s": "l"},
    "right": {"Side": "Right", "S": "R", "s": "r"},
}


def expand_profile(profile: Dict[str, Dict[str, str]]) -> Dict[str, str]:
    """Role -> exact bone name for both sides of a profile."""
    names = dict(profile["center"])
    for side in SIDES:
        for part, template in profile["side"].items():
            names[side + part] = template.format(**_SIDE_TOKENS[side])
    return names


def normalize_bone_name(name: str) -> str:
    """Lower-case and drop namespaces ("mixamorig:LeftArm" -> "leftarm")."""
    for sep in (':', '|'):
        if sep in name:
            name = name.rsplit(sep, 1)[1]
    return name.strip().lower()


# =============================================================================
# FUZZY RULES
# =============================================================================

class PartRule(NamedTuple):
    predicate: Callable[[str], bool]
    part: str


def _has(pattern: str) -> Callable[[str], bool]:
    regex = re.compile(pattern)
    return lambda name: regex.search(name) is not None


def _has_except(pattern: str, exclude: str) -> Callable[[str], bool]:
    regex = re.compile(pattern)
    excluded = re.compile(exclude)
    return lambda name: regex.search(name) is not None and excluded.search(name) is None


# Bones that never get a role
_IGNORED = re.compile(r"index|middle|ring|pinky|thumb|finger|twist|roll|pole|target|end$")

# First match wins; order matters ("forearm" before "arm", "upleg" vs "leg")
LIMB_PART_RULES: Tuple[PartRule, ...] = (
    PartRule(_has(r"toe|ball"), "ToeBase"),
    PartRule(_has(r"foot|ankle"), "Foot"),
    PartRule(_has(r"shin|calf|lowerleg|knee"), "LowerLeg"),
    PartRule(_has_except(r"leg", r"up|upper|thigh"), "LowerLeg"),
    PartRule(_has(r"thigh|upleg|upperleg"), "UpperLeg"),
    PartRule(_has(r"hand|wrist"), "Hand"),
    PartRule(_has(r"forearm|lowerarm|elbow"), "LowerArm"),
    PartRule(_has(r"upperarm|arm"), "UpperArm"),
    PartRule(_has(r"shoulder|clavicle"), "Shoulder"),
)

CENTER_RULES: Tuple[PartRule, ...] = (
    PartRule(_has(r"hips|pelvis"), "hips"),
    PartRule(_has(r"chest|spine2|spine_03"), "chest"),
    PartRule(_has(r"spine"), "spine"),
    PartRule(_has(r"neck"), "neck"),
    PartRule(_has(r"head"), "head"),
)


def detect_side(name: str) -> Optional[str]:
    """
    Side marker of a normalized bone name.

    Returns:
        "left", "right" or None
    """
    if "left" in name:
        return "left"
    if "right" in name:
        return "right"
    tokens = [t for t in re.split(r"[^a-z0-9]+", name) if t]
    if "l" in tokens:
        return "left"
    if "r" in tokens:
        return "right"
    return None


def fuzzy_role(name: str) -> Optional[str]:
    """Canonical role for a normalized bone name, or None."""
    if _IGNORED.search(name):
        return None

    side = detect_side(name)
    if side is None:
        for rule in CENTER_RULES:
            if rule.predicate(name):
                return rule.part
        return None

    # Strip side words so "right" cannot match "hand"-style patterns by accident
    core = re.sub(r"left|right", "", name)
    for rule in LIMB_PART_RULES:
        if rule.predicate(core):
            return side + rule.part
    return None


# =============================================================================
# MAPPER
# =============================================================================

class NameBoneMapper:
    """
    RoleMapper implementation based on bone names only.

    Usage:
        mapper = NameBoneMapper()
        mapping = mapper.map(bones)
        mapping.complete, mapping.platform_name, mapping.bones["leftHand"]
    """

    def __init__(self, profiles: Optional[Dict[str, Dict[str, Dict[str, str]]]] = None):
        profiles = profiles if profiles is not None else PLATFORM_PROFILES
        self.profiles: Dict[str, Dict[str, str]] = {
            name: {role: normalize_bone_name(bone) for role, bone in expand_profile(p).items()}
            for name, p in profiles.items()
        }

    def map(self, bones: Sequence[BoneRef]) -> BoneMapping:
        by_name: Dict[str, BoneRef] = {}
        for bone in bones:
            by_name.setdefault(normalize_bone_name(bone.name), bone)

        platform_name, mapped = self._best_profile(by_name)

        # Fuzzy fill for everything the profile left open
        taken = {bone.uid for bone in mapped.values()}
        for bone in bones:
            if bone.uid in taken:
                continue
            role = fuzzy_role(normalize_bone_name(bone.name))
            if role is not None and role not in mapped:
                mapped[role] = bone
                taken.add(bone.uid)

        complete = all(role in mapped for role in REQUIRED_ROLES)
        return BoneMapping(complete=complete, platform_name=platform_name, bones=mapped)

    def _best_profile(self, by_name: Dict[str, BoneRef]) -> Tuple[Optional[str], Dict[str, BoneRef]]:
        best_name: Optional[str] = None
        best: Dict[str, BoneRef] = {}

        for name, roles in self.profiles.items():
            hits = {role: by_name[bone] for role, bone in roles.items() if bone in by_name}
            if len(hits) > len(best):
                best_name, best = name, hits

        if len(best) < PLATFORM_MIN_MATCHES:
            return None, {}
        return best_name, best


def mapped_role_names(mapping: BoneMapping) -> List[str]:
    """Mapped roles in canonical order (for reports)."""
    return [role for role in CANONICAL_ROLES if role in mapping.bones]
