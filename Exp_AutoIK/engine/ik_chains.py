# Exp_AutoIK/engine/ik_chains.py
"""
IK Chain Definitions and Assembly.

Limb definitions (by canonical role name), synthetic target slots, and the
functions that turn a role mapping into ChainDescriptors.

USAGE:
    from .ik_chains import LEG_CHAINS, ARM_CHAINS, build_leg_chain, build_arm_chain
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..autoik_config import (
    IK_ITERATION_LIMIT,
    IK_MIN_ANGLE,
    IK_MAX_ANGLE,
    TARGET_SLOT_ORDER,
    TARGET_BONE_PREFIX,
)
from .constraints import ConstraintDescriptor
from .skeleton import Bone, BoneRef, MalformedCollaboratorResponse


# =============================================================================
# LIMB DEFINITIONS - canonical role names
# =============================================================================

LEG_CHAINS: Dict[str, dict] = {
    "leftLeg": {
        "root": "leftUpperLeg",     # Hip joint (ball, unconstrained)
        "mid": "leftLowerLeg",      # Knee joint (hinge)
        "tip": "leftFoot",
        "toe": "leftToeBase",       # Optional, preferred effector
        "joint": "leftKnee",
        "target": "leftFoot",
    },
    "rightLeg": {
        "root": "rightUpperLeg",
        "mid": "rightLowerLeg",
        "tip": "rightFoot",
        "toe": "rightToeBase",
        "joint": "rightKnee",
        "target": "rightFoot",
    },
}

ARM_CHAINS: Dict[str, dict] = {
    "leftArm": {
        "root": "leftUpperArm",     # Shoulder joint (ball, unconstrained)
        "clavicle": "leftShoulder", # Upper link when the upper arm is unmapped
        "mid": "leftLowerArm",      # Elbow joint (hinge)
        "tip": "leftHand",
        "joint": "leftElbow",
        "target": "leftHand",
    },
    "rightArm": {
        "root": "rightUpperArm",
        "clavicle": "rightShoulder",
        "mid": "rightLowerArm",
        "tip": "rightHand",
        "joint": "rightElbow",
        "target": "rightHand",
    },
}

# Fixed output order
LIMB_ORDER = ("leftLeg", "rightLeg", "leftArm", "rightArm")

# Hinge joints that receive a constraint: joint key -> (role, biomechanical name)
CONSTRAINED_JOINTS: Dict[str, Tuple[str, str]] = {
    "leftKnee": ("leftLowerLeg", "knee"),
    "rightKnee": ("rightLowerLeg", "knee"),
    "leftElbow": ("leftLowerArm", "elbow"),
    "rightElbow": ("rightLowerArm", "elbow"),
}


def get_limb(limb_name: str) -> Optional[dict]:
    """Limb definition by name, or None."""
    return LEG_CHAINS.get(limb_name) or ARM_CHAINS.get(limb_name)


def get_limb_type(limb_name: str) -> str:
    """
    Returns:
        "leg", "arm" or "unknown"
    """
    if limb_name in LEG_CHAINS:
        return "leg"
    elif limb_name in ARM_CHAINS:
        return "arm"
    return "unknown"


def required_roles(limb_name: str) -> Tuple[str, ...]:
    """
    Roles that must be mapped for a limb chain to be built.

    A leg needs upper leg, lower leg and foot. An arm needs lower arm and
    hand; the upper arm only feeds the link list.
    """
    limb = get_limb(limb_name)
    if limb is None:
        raise ValueError(f"Unknown limb: {limb_name}")
    if get_limb_type(limb_name) == "leg":
        return (limb["root"], limb["mid"], limb["tip"])
    return (limb["mid"], limb["tip"])


def missing_roles(limb_name: str, mapped_bones: Mapping[str, BoneRef]) -> Tuple[str, ...]:
    """Required roles of a limb that the mapping lacks."""
    return tuple(role for role in required_roles(limb_name) if mapped_bones.get(role) is None)


# =============================================================================
# CHAIN DATA STRUCTURES
# =============================================================================

@dataclass
class LinkDescriptor:
    """One joint of a chain: bone index + optional constraint."""
    index: int
    constraint: Optional[ConstraintDescriptor] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'index': self.index}
        if self.constraint is not None:
            data['swingTwistConstraint'] = self.constraint.to_dict()
        return data


@dataclass
class ChainDescriptor:
    """
    IK chain ready for a solver.

    links are ordered from the effector toward the root.
    min_angle / max_angle are solver step bounds, not joint limits.
    """
    name: str
    target: int
    effector: int
    links: List[LinkDescriptor] = field(default_factory=list)
    iteration_limit: int = IK_ITERATION_LIMIT
    min_angle: float = IK_MIN_ANGLE
    max_angle: float = IK_MAX_ANGLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'target': self.target,
            'effector': self.effector,
            'iteration': self.iteration_limit,
            'minAngle': self.min_angle,
            'maxAngle': self.max_angle,
            'links': [link.to_dict() for link in self.links],
        }


# =============================================================================
# TARGETS
# =============================================================================

@dataclass(frozen=True)
class TargetSlot:
    """Reserved index for a synthetic IK target bone."""
    role: str                       # "leftFoot", ...
    index: int                      # Position after the skeleton's own bones
    name: str                       # Synthetic bone name
    anchor_index: Optional[int]     # Mapped foot/hand bone, if any

    def to_dict(self) -> Dict[str, Any]:
        return {
            'role': self.role,
            'index': self.index,
            'name': self.name,
            'anchorIndex': self.anchor_index,
        }


def reserve_target_slots(
    bone_count: int,
    mapped_bones: Mapping[str, BoneRef],
    bone_index: Mapping[str, int]
) -> Dict[str, TargetSlot]:
    """
    Reserve one target index per TARGET_SLOT_ORDER role, directly after the
    skeleton's bones (bone_count + 0..3). Slots are reserved even for limbs
    the rig lacks, so indices do not depend on the mapping.
    """
    slots: Dict[str, TargetSlot] = {}
    for offset, role in enumerate(TARGET_SLOT_ORDER):
        anchor = mapped_bones.get(role)
        slots[role] = TargetSlot(
            role=role,
            index=bone_count + offset,
            name=f"{TARGET_BONE_PREFIX}{role}",
            anchor_index=bone_index.get(anchor.uid) if anchor is not None else None,
        )
    return slots


def rest_offset_from_root(bone: BoneRef, bones_by_name: Mapping[str, BoneRef]) -> Tuple[float, float, float]:
    """
    Sum of local offsets from the root down to a bone.

    Assumes identity rest rotations, which is how the target placeholders
    are placed; a solver moves the targets anyway.
    """
    x = y = z = 0.0
    current: Optional[BoneRef] = bone
    seen = set()
    while current is not None and current.uid not in seen:
        seen.add(current.uid)
        ox, oy, oz = current.offset
        x, y, z = x + ox, y + oy, z + oz
        parent_name = getattr(current, 'parent', None)
        current = bones_by_name.get(parent_name) if parent_name else None
    return (x, y, z)


def create_target_bones(bones: Sequence[BoneRef], slots: Mapping[str, TargetSlot]) -> List[BoneRef]:
    """
    Return a NEW bone list: the input bones followed by one synthetic target
    bone per slot, in slot index order. The input sequence is not modified.

    Each target is parented to the skeleton root and placed at its anchor's
    rest position (origin when the anchor is unmapped).

    Raises:
        ValueError: if slot indices do not continue the bone sequence
    """
    result: List[BoneRef] = list(bones)
    bones_by_name = {b.name: b for b in bones}
    root = next((b for b in bones if getattr(b, 'parent', None) is None), None)
    root_offset = root.offset if root is not None else (0.0, 0.0, 0.0)

    for slot in sorted(slots.values(), key=lambda s: s.index):
        if slot.index != len(result):
            raise ValueError(f"Target slot {slot.role} index {slot.index} != {len(result)}")

        if slot.anchor_index is not None:
            px, py, pz = rest_offset_from_root(bones[slot.anchor_index], bones_by_name)
            # Relative to the root bone, which carries root_offset itself
            offset = (px - root_offset[0], py - root_offset[1], pz - root_offset[2])
        else:
            offset = (0.0, 0.0, 0.0)

        target = Bone(
            name=slot.name,
            offset=offset,
            parent=root.name if root is not None else None,
        )
        result.append(target)

    return result


# =============================================================================
# CHAIN ASSEMBLY
# =============================================================================

def _index_of(bone: BoneRef, bone_index: Mapping[str, int], role: str) -> int:
    try:
        return bone_index[bone.uid]
    except KeyError:
        raise MalformedCollaboratorResponse(
            f"Mapped bone '{bone.name}' for role '{role}' is not part of the skeleton"
        ) from None


def build_leg_chain(
    limb_name: str,
    mapped_bones: Mapping[str, BoneRef],
    bone_index: Mapping[str, int],
    constraints: Mapping[str, Optional[ConstraintDescriptor]],
    target_index: int
) -> Optional[ChainDescriptor]:
    """
    Create a leg IK chain: [knee (constrained), hip (unconstrained)].

    Args:
        limb_name: "leftLeg" or "rightLeg"
        mapped_bones: Role -> bone
        bone_index: Bone uid -> skeleton index
        constraints: Joint key ("leftKnee", ...) -> constraint or None
        target_index: Reserved target slot index

    Returns:
        ChainDescriptor, or None if upper leg, lower leg or foot is missing
    """
    limb = LEG_CHAINS[limb_name]
    hip_bone = mapped_bones.get(limb["root"])
    knee_bone = mapped_bones.get(limb["mid"])
    foot_bone = mapped_bones.get(limb["tip"])
    toe_bone = mapped_bones.get(limb["toe"])

    if hip_bone is None or knee_bone is None or foot_bone is None:
        return None

    # Toe is more distal than the foot
    if toe_bone is not None:
        effector = _index_of(toe_bone, bone_index, limb["toe"])
    else:
        effector = _index_of(foot_bone, bone_index, limb["tip"])

    return ChainDescriptor(
        name=limb_name,
        target=target_index,
        effector=effector,
        links=[
            LinkDescriptor(_index_of(knee_bone, bone_index, limb["mid"]),
                           constraints.get(limb["joint"])),
            # Hip: ball joint, no constraint yet
            LinkDescriptor(_index_of(hip_bone, bone_index, limb["root"])),
        ],
    )


def build_arm_chain(
    limb_name: str,
    mapped_bones: Mapping[str, BoneRef],
    bone_index: Mapping[str, int],
    constraints: Mapping[str, Optional[ConstraintDescriptor]],
    target_index: int
) -> Optional[ChainDescriptor]:
    """
    Create an arm IK chain: [elbow (constrained), upper arm (unconstrained)].

    The upper link falls back to the shoulder (clavicle) when the upper arm
    is unmapped, and is left out when both are.

    Returns:
        ChainDescriptor, or None if lower arm or hand is missing
    """
    limb = ARM_CHAINS[limb_name]
    upper_bone = mapped_bones.get(limb["root"])
    clavicle_bone = mapped_bones.get(limb["clavicle"])
    elbow_bone = mapped_bones.get(limb["mid"])
    hand_bone = mapped_bones.get(limb["tip"])

    if elbow_bone is None or hand_bone is None:
        return None

    links = [
        LinkDescriptor(_index_of(elbow_bone, bone_index, limb["mid"]),
                       constraints.get(limb["joint"])),
    ]
    if upper_bone is not None:
        links.append(LinkDescriptor(_index_of(upper_bone, bone_index, limb["root"])))
    elif clavicle_bone is not None:
        # No upper arm mapped: the shoulder (clavicle) stands in as the upper
        # joint. Both missing leaves a single-link chain (builder warns).
        links.append(LinkDescriptor(_index_of(clavicle_bone, bone_index, limb["clavicle"])))

    return ChainDescriptor(
        name=limb_name,
        target=target_index,
        effector=_index_of(hand_bone, bone_index, limb["tip"]),
        links=links,
    )
