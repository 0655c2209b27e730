# Exp_AutoIK/engine/ik_math.py
"""
IK Math Utilities - vector helpers for constraint synthesis.

Pure numpy math. All vectors are numpy arrays with dtype=float32.
"""

import math
import numpy as np
from typing import Sequence

AXIS_LABELS = ('x', 'y', 'z')


# =============================================================================
# VECTOR OPERATIONS
# =============================================================================

def as_vec3(v: Sequence[float]) -> np.ndarray:
    """
    Coerce any 3-component sequence into a float32 vector.

    Raises:
        ValueError: if v does not hold exactly 3 finite numbers
    """
    arr = np.asarray(v, dtype=np.float32).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"Vector has non-finite components: {tuple(arr)}")
    return arr


def normalize(v: np.ndarray) -> np.ndarray:
    """
    Normalize a vector to unit length.

    Args:
        v: Input vector

    Returns:
        Normalized vector (or zero vector if input is zero)
    """
    length = np.linalg.norm(v)
    if length < 1e-10:
        return np.zeros_like(v)
    return v / length


def is_zero(v: np.ndarray) -> bool:
    """True for a (near) zero-length vector."""
    return float(np.linalg.norm(v)) < 1e-10


def axis_vector(label: str) -> np.ndarray:
    """Unit vector for a local axis label ("x", "y" or "z", any case, optional sign)."""
    label = label.strip().lower()
    sign = -1.0 if label.startswith('-') else 1.0
    key = label.lstrip('+-')
    if key not in AXIS_LABELS:
        raise ValueError(f"Unknown axis label: {label}")
    v = np.zeros(3, dtype=np.float32)
    v[AXIS_LABELS.index(key)] = sign
    return v


def dominant_axis(v: np.ndarray) -> str:
    """
    Which local axis a vector most closely aligns with.

    Returns:
        "x", "y" or "z" (unsigned)
    """
    return AXIS_LABELS[int(np.argmax(np.abs(v)))]


# =============================================================================
# ANGLES
# =============================================================================

def deg_to_rad(degrees: float) -> float:
    """Degrees to radians as a plain float."""
    return math.radians(float(degrees))


def rad_to_deg(radians: float) -> float:
    """Radians to degrees as a plain float."""
    return math.degrees(float(radians))
