# Exp_AutoIK/autoik_config.py
"""
Configuration for the automatic IK constraint builder.
Adjust these values based on your needs.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

# Solver step bounds written into every chain.
# These are per-iteration step limits for the IK solver, NOT joint limits.
IK_ITERATION_LIMIT = 10
IK_MIN_ANGLE = 0.0
IK_MAX_ANGLE = 0.3

# Synthetic IK target slots, appended after the skeleton's own bones
# in exactly this order.
TARGET_SLOT_ORDER = ("leftFoot", "rightFoot", "leftHand", "rightHand")

# Name prefix for the synthetic target bones
TARGET_BONE_PREFIX = "IK_Target_"

# Default file name when saving a custom biomechanical table next to a rig
BIOMECHANICS_FILE_NAME = "biomechanics.json"


@dataclass(frozen=True)
class BuildOptions:
    """Options for a single IK build."""
    enable_legs: bool = True
    enable_arms: bool = True
    enable_spine: bool = False      # Reserved - spine IK is not built yet
    log_detection: bool = True      # Diagnostic verbosity only

    def merged(self, overrides: Optional[Dict[str, Any]] = None) -> 'BuildOptions':
        """
        Return a copy with a partial configuration applied.

        Accepts snake_case keys and their camelCase aliases
        ("enableLegs", "logDetection", ...).

        Raises:
            ValueError: on an unknown option key.
        """
        if not overrides:
            return self

        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown build option: {key}")
            changes[name] = bool(value)

        return replace(self, **changes)


_OPTION_ALIASES = {
    "enableLegs": "enable_legs",
    "enableArms": "enable_arms",
    "enableSpine": "enable_spine",
    "logDetection": "log_detection",
}

DEFAULT_OPTIONS = BuildOptions()
