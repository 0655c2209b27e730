# Exp_AutoIK/engine/constraints.py
"""
Swing-Twist Constraint Synthesis.

Turns a detected rotation axis plus biomechanical limits into a swing-twist
constraint for an IK solver:

    twist        rotation about the primary axis, [twist_min, twist_max]
    swing        rotation away from that axis, bounded by a cone (swing_radius)

Hinge (knee, elbow):
    twist_min = -extension, twist_max = flexion, swing = wiggle
    Extension is the "backward" sense, hence negative.

Ball (hip, shoulder):
    twist = +/- rotation, swing = flexion
    The axial rotation is the smaller freedom and becomes the twist; the
    largest planar motion becomes the cone.

All input angles in degrees, all output angles in radians.
"""

import numpy as np
from typing import Any, Callable, Dict, Optional, Sequence

from ..developer.dev_logger import log_ik
from .biomechanics import BiomechanicalTable, default_table, HINGE, BALL, UNIVERSAL
from .ik_math import as_vec3, deg_to_rad, is_zero, normalize
from .skeleton import MalformedCollaboratorResponse

# Factory defaults (used when an entry lacks a field)
DEFAULT_HINGE_FLEXION = 130.0
DEFAULT_HINGE_EXTENSION = 0.0
DEFAULT_HINGE_WIGGLE = 5.0
DEFAULT_BALL_TWIST = 90.0
DEFAULT_BALL_SWING = 90.0

CONSTRAINT_TYPES = (HINGE, BALL)


# =============================================================================
# CONSTRAINT DATA STRUCTURE
# =============================================================================

class ConstraintDescriptor:
    """
    Swing-twist constraint for one joint.

    twist_min <= 0 <= twist_max is expected but NOT enforced; see
    is_well_formed.
    """
    __slots__ = ('type', 'twist_axis', 'twist_min', 'twist_max', 'swing_radius')

    def __init__(
        self,
        type: str,
        twist_axis: np.ndarray,
        twist_min: float,
        twist_max: float,
        swing_radius: float
    ):
        self.type: str = type
        self.twist_axis: np.ndarray = twist_axis
        self.twist_min: float = twist_min
        self.twist_max: float = twist_max
        self.swing_radius: float = swing_radius

    @property
    def is_well_formed(self) -> bool:
        return self.twist_min <= 0.0 <= self.twist_max and self.swing_radius >= 0.0

    def __repr__(self) -> str:
        axis = tuple(round(float(c), 4) for c in self.twist_axis)
        return (f"ConstraintDescriptor({self.type}, axis={axis}, "
                f"twist=[{self.twist_min:.4f}, {self.twist_max:.4f}], "
                f"swing={self.swing_radius:.4f})")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'type': self.type,
            'twistAxis': tuple(float(c) for c in self.twist_axis),
            'twistMin': self.twist_min,
            'twistMax': self.twist_max,
            'swingRadius': self.swing_radius,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'ConstraintDescriptor':
        """Create from dictionary."""
        return ConstraintDescriptor(
            type=data['type'],
            twist_axis=np.array(data['twistAxis'], dtype=np.float32),
            twist_min=float(data['twistMin']),
            twist_max=float(data['twistMax']),
            swing_radius=float(data['swingRadius']),
        )


def _unit_axis(twist_axis: Sequence[float]) -> np.ndarray:
    try:
        axis = as_vec3(twist_axis)
    except (TypeError, ValueError) as e:
        raise MalformedCollaboratorResponse(f"Bad twist axis: {e}") from e
    if is_zero(axis):
        raise MalformedCollaboratorResponse("Twist axis has zero length")
    return normalize(axis)


# =============================================================================
# FACTORIES
# =============================================================================

def create_hinge_constraint(
    twist_axis: Sequence[float],
    flexion: float = DEFAULT_HINGE_FLEXION,
    extension: float = DEFAULT_HINGE_EXTENSION,
    wiggle: float = DEFAULT_HINGE_WIGGLE
) -> ConstraintDescriptor:
    """
    Create a hinge joint constraint (knee, elbow).

    Args:
        twist_axis: Primary rotation axis (normalized here)
        flexion: Max flexion in degrees
        extension: Max extension in degrees (usually 0)
        wiggle: Secondary axis tolerance in degrees

    Returns:
        ConstraintDescriptor of type "hinge"
    """
    constraint = ConstraintDescriptor(
        type=HINGE,
        twist_axis=_unit_axis(twist_axis),
        twist_min=deg_to_rad(-extension),
        twist_max=deg_to_rad(flexion),
        swing_radius=deg_to_rad(wiggle),
    )
    if not constraint.is_well_formed:
        log_ik("CONSTRAINT", f"Malformed hinge constraint: {constraint!r}", level="WARNING")
    return constraint


def create_ball_constraint(
    twist_axis: Sequence[float],
    twist_range: float = DEFAULT_BALL_TWIST,
    swing_range: float = DEFAULT_BALL_SWING
) -> ConstraintDescriptor:
    """
    Create a ball joint constraint (hip, shoulder).

    Args:
        twist_axis: Primary rotation axis (normalized here)
        twist_range: Twist in degrees, applied symmetrically (+/-)
        swing_range: Swing cone radius in degrees

    Returns:
        ConstraintDescriptor of type "ball"
    """
    constraint = ConstraintDescriptor(
        type=BALL,
        twist_axis=_unit_axis(twist_axis),
        twist_min=deg_to_rad(-twist_range),
        twist_max=deg_to_rad(twist_range),
        swing_radius=deg_to_rad(swing_range),
    )
    if not constraint.is_well_formed:
        log_ik("CONSTRAINT", f"Malformed ball constraint: {constraint!r}", level="WARNING")
    return constraint


def _log_warning(category: str, text: str) -> None:
    log_ik(category, text, level="WARNING")


def create_from_biomechanics(
    joint_name: str,
    detected_axis: Sequence[float],
    table: Optional[BiomechanicalTable] = None,
    warn: Optional[Callable[[str, str], None]] = None
) -> Optional[ConstraintDescriptor]:
    """
    Create a constraint from biomechanical data and a detected axis.

    Args:
        joint_name: "knee", "elbow", "hip", "shoulder", ...
        detected_axis: Direction from the axis detector
        table: Biomechanical table (default table if None)
        warn: Receives (category, text) for non-fatal problems
              (default: dev logger WARNING)

    Returns:
        ConstraintDescriptor, or None for an unknown joint name or a
        universal joint (a warning is issued, nothing is raised)
    """
    if table is None:
        table = default_table()
    if warn is None:
        warn = _log_warning

    entry = table.lookup(joint_name)
    if entry is None:
        warn("CONSTRAINT", f"No biomechanical data for joint: {joint_name}")
        return None

    if entry.kind == HINGE:
        return create_hinge_constraint(
            detected_axis,
            entry.get('flexion', DEFAULT_HINGE_FLEXION),
            entry.get('extension', DEFAULT_HINGE_EXTENSION),
            entry.get('wiggle', DEFAULT_HINGE_WIGGLE),
        )

    if entry.kind == BALL:
        return create_ball_constraint(
            detected_axis,
            entry.get('rotation', DEFAULT_BALL_TWIST),
            entry.get('flexion', DEFAULT_BALL_SWING),
        )

    # UNIVERSAL - two coupled freedoms, no single twist axis
    warn("CONSTRAINT", f"No swing-twist mapping for {UNIVERSAL} joint: {joint_name}")
    return None
