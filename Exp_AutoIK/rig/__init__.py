# Exp_AutoIK/rig/__init__.py
"""
Reference collaborators for the auto IK builder.

NameBoneMapper     - bone names -> canonical roles (platform profiles + fuzzy)
OffsetAxisDetector - rest offsets -> primary rotation axis
"""

from .bone_mapper import (
    NameBoneMapper,
    PLATFORM_PROFILES,
    CANONICAL_ROLES,
    REQUIRED_ROLES,
    normalize_bone_name,
    detect_side,
    fuzzy_role,
    mapped_role_names,
)
from .axis_detector import OffsetAxisDetector, HINGE_AXIS_PREFERENCE, long_axis_dominance

__all__ = [
    'NameBoneMapper',
    'PLATFORM_PROFILES',
    'CANONICAL_ROLES',
    'REQUIRED_ROLES',
    'normalize_bone_name',
    'detect_side',
    'fuzzy_role',
    'mapped_role_names',
    'OffsetAxisDetector',
    'HINGE_AXIS_PREFERENCE',
    'long_axis_dominance',
]
