# Exp_AutoIK/engine/skeleton.py
"""
Skeleton data and collaborator contracts.

Bones are plain python objects (no scene references) so a skeleton snapshot
can be pickled, copied and compared.

Collaborators consumed by the builder:
- RoleMapper:   map(bones) -> BoneMapping
- AxisDetector: detect_primary_axis(bone) -> AxisResult

Responses are validated at the seam. Anything malformed raises
MalformedCollaboratorResponse; missing data (unmapped roles) is NOT an error.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from .ik_math import as_vec3, is_zero, normalize, AXIS_LABELS


class MalformedCollaboratorResponse(ValueError):
    """A role mapper or axis detector returned data the builder cannot use."""


# =============================================================================
# BONES
# =============================================================================

class BoneRef(Protocol):
    """What the builder needs from a bone."""
    uid: str                                # Stable identity (index lookup)
    name: str                               # Human-readable (classification)
    offset: Tuple[float, float, float]      # Local position relative to parent


@dataclass(eq=False)
class Bone:
    """
    Concrete bone of a skeleton snapshot.

    Compared by identity. `uid` defaults to the name, which is unique in
    every rig format we read.
    """
    name: str
    offset: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    parent: Optional[str] = None
    uid: str = ""
    children: List['Bone'] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self.uid:
            self.uid = self.name
        self.offset = tuple(float(c) for c in self.offset)

    def first_child(self) -> Optional['Bone']:
        return self.children[0] if self.children else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'uid': self.uid,
            'offset': self.offset,
            'parent': self.parent,
            'children': [c.name for c in self.children],
        }


def make_skeleton(bone_data: Sequence[Tuple[str, Optional[str], Sequence[float]]]) -> List[Bone]:
    """
    Build a linked bone list from (name, parent_name, offset) rows.

    Rows keep their order; parents must appear before children.

    Raises:
        ValueError: on a duplicate name or an unknown parent
    """
    bones: List[Bone] = []
    by_name: Dict[str, Bone] = {}

    for name, parent_name, offset in bone_data:
        if name in by_name:
            raise ValueError(f"Duplicate bone name: {name}")
        bone = Bone(name=name, offset=tuple(offset), parent=parent_name)
        if parent_name is not None:
            parent = by_name.get(parent_name)
            if parent is None:
                raise ValueError(f"Bone '{name}': parent '{parent_name}' not defined before it")
            parent.children.append(bone)
        bones.append(bone)
        by_name[name] = bone

    return bones


def build_bone_index(bones: Sequence[BoneRef]) -> Dict[str, int]:
    """Bone identity -> position in the flat bone sequence."""
    return {bone.uid: i for i, bone in enumerate(bones)}


# =============================================================================
# ROLE MAPPING
# =============================================================================

@dataclass
class BoneMapping:
    """
    Result of role mapping.

    Attributes:
        complete: Hard gate - False means the rig is unsupported
        platform_name: Detected rig platform, or None for fuzzy matches
        bones: Canonical role name ("leftUpperLeg", ...) -> bone
    """
    complete: bool
    platform_name: Optional[str] = None
    bones: Dict[str, BoneRef] = field(default_factory=dict)

    def get(self, role: str) -> Optional[BoneRef]:
        return self.bones.get(role)


class RoleMapper(Protocol):
    def map(self, bones: Sequence[BoneRef]) -> BoneMapping:
        ...


def coerce_mapping(response: Any) -> BoneMapping:
    """
    Validate a role mapper response.

    Accepts a BoneMapping or a dict with "complete", "platformName" and
    "bones" keys.
    """
    if isinstance(response, BoneMapping):
        mapping = response
    elif isinstance(response, Mapping) and 'complete' in response:
        mapping = BoneMapping(
            complete=response['complete'],
            platform_name=response.get('platformName', response.get('platform_name')),
            bones=response.get('bones') or {},
        )
    else:
        raise MalformedCollaboratorResponse(
            f"Role mapper returned {type(response).__name__}, expected BoneMapping"
        )

    if not isinstance(mapping.complete, (bool, np.bool_)):
        raise MalformedCollaboratorResponse("BoneMapping.complete must be a bool")

    # Incomplete mapping: nothing else is read
    if not mapping.complete:
        return BoneMapping(complete=False, platform_name=mapping.platform_name, bones={})

    if not isinstance(mapping.bones, Mapping):
        raise MalformedCollaboratorResponse("BoneMapping.bones must be a mapping")

    return BoneMapping(
        complete=bool(mapping.complete),
        platform_name=mapping.platform_name,
        bones={role: bone for role, bone in mapping.bones.items() if bone is not None},
    )


# =============================================================================
# AXIS DETECTION
# =============================================================================

@dataclass
class AxisResult:
    """
    Primary rotation axis of a bone, in the bone's local frame.

    Attributes:
        axis: "x", "y" or "z"
        direction: Unit vector (float32)
        confidence: 0.0 - 1.0
    """
    axis: str
    direction: np.ndarray
    confidence: float


class AxisDetector(Protocol):
    def detect_primary_axis(self, bone: BoneRef) -> AxisResult:
        ...


def coerce_axis_result(response: Any, bone_name: str = "") -> AxisResult:
    """
    Validate an axis detector response.

    Raises:
        MalformedCollaboratorResponse: wrong type, non-3D or zero direction,
            unknown axis label, or confidence outside [0, 1]
    """
    if isinstance(response, AxisResult):
        axis, direction, confidence = response.axis, response.direction, response.confidence
    elif isinstance(response, Mapping):
        try:
            axis = response['axis']
            direction = response['direction']
            confidence = response['confidence']
        except KeyError as e:
            raise MalformedCollaboratorResponse(
                f"Axis result for '{bone_name}' is missing {e}"
            ) from e
    else:
        raise MalformedCollaboratorResponse(
            f"Axis detector returned {type(response).__name__} for '{bone_name}'"
        )

    try:
        vec = as_vec3(direction)
    except (TypeError, ValueError) as e:
        raise MalformedCollaboratorResponse(f"Bad axis direction for '{bone_name}': {e}") from e
    if is_zero(vec):
        raise MalformedCollaboratorResponse(f"Zero-length axis direction for '{bone_name}'")

    label = str(axis).strip().lower().lstrip('+-')
    if label not in AXIS_LABELS:
        raise MalformedCollaboratorResponse(f"Unknown axis label '{axis}' for '{bone_name}'")

    try:
        confidence = float(confidence)
    except (TypeError, ValueError) as e:
        raise MalformedCollaboratorResponse(f"Bad axis confidence for '{bone_name}': {e}") from e
    if not 0.0 <= confidence <= 1.0:
        raise MalformedCollaboratorResponse(
            f"Axis confidence {confidence} for '{bone_name}' outside [0, 1]"
        )

    return AxisResult(axis=label, direction=normalize(vec), confidence=confidence)
