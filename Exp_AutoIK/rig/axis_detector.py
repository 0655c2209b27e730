# Exp_AutoIK/rig/axis_detector.py
"""
Offset-based axis detector.

A bone's long axis is where its first child sits (the child's offset, in
the bone's local frame). Without children the bone's own offset from its
parent is used instead, at half confidence. The hinge axis is the first
of HINGE_AXIS_PREFERENCE that is not the long axis - most rigs point bones
along +Y, so knees and elbows bend about X.

Confidence is how cleanly the long axis lines up with a local axis:
1.0 when the offset lies on one axis, 0.0 when it points along a
diagonal (all components equal).
"""

import math
import numpy as np
from typing import Optional, Tuple

from ..engine.ik_math import as_vec3, axis_vector, dominant_axis, is_zero
from ..engine.skeleton import AxisResult, BoneRef

HINGE_AXIS_PREFERENCE: Tuple[str, ...] = ('x', 'z', 'y')

# Own offset instead of a child's: the parent may not point at this bone's tip
PARENT_OFFSET_CONFIDENCE = 0.5

_DIAGONAL = 1.0 / math.sqrt(3.0)


def long_axis_dominance(direction: np.ndarray) -> float:
    """
    0.0 - 1.0: share of the vector on its dominant axis, rescaled so a
    perfect diagonal is 0.
    """
    length = float(np.linalg.norm(direction))
    if length < 1e-10:
        return 0.0
    share = float(np.max(np.abs(direction))) / length
    return min(1.0, max(0.0, (share - _DIAGONAL) / (1.0 - _DIAGONAL)))


def hinge_axis_for(long_axis: str) -> str:
    for label in HINGE_AXIS_PREFERENCE:
        if label != long_axis:
            return label
    return HINGE_AXIS_PREFERENCE[0]


class OffsetAxisDetector:
    """
    AxisDetector implementation from rest offsets only.

    Usage:
        detector = OffsetAxisDetector()
        result = detector.detect_primary_axis(knee_bone)
        result.axis, result.direction, result.confidence
    """

    def detect_primary_axis(self, bone: BoneRef) -> AxisResult:
        direction, weight = self._bone_direction(bone)

        if direction is None:
            # Zero-length bone: nothing to measure
            return AxisResult(axis=HINGE_AXIS_PREFERENCE[0],
                              direction=axis_vector(HINGE_AXIS_PREFERENCE[0]),
                              confidence=0.0)

        label = hinge_axis_for(dominant_axis(direction))
        return AxisResult(
            axis=label,
            direction=axis_vector(label),
            confidence=long_axis_dominance(direction) * weight,
        )

    @staticmethod
    def _bone_direction(bone: BoneRef) -> Tuple[Optional[np.ndarray], float]:
        # BoneRef only guarantees uid/name/offset; Bone adds the hierarchy
        first_child = getattr(bone, 'first_child', None)
        child = first_child() if first_child is not None else None
        if child is not None:
            child_offset = as_vec3(child.offset)
            if not is_zero(child_offset):
                return child_offset, 1.0

        own_offset = as_vec3(bone.offset)
        if not is_zero(own_offset):
            return own_offset, PARENT_OFFSET_CONFIDENCE

        return None, 0.0
