# Exp_AutoIK/developer/dev_debug_gate.py
"""
Debug output gating.

Each log category can be switched on or off. Categories that were never
configured are enabled.
"""

from typing import Dict

# Known categories (log category -> enabled flag)
_category_enabled: Dict[str, bool] = {
    'AUTO-IK': True,        # Build start/summary
    'RIG-MAP': True,        # Role mapping results
    'AXIS': True,           # Per-joint axis detection
    'CONSTRAINT': True,     # Constraint synthesis
    'IK-CHAIN': True,       # Chain assembly / limb skips
}


def should_log(category: str) -> bool:
    """Check if output for a category is enabled."""
    return _category_enabled.get(category, True)


def set_category_enabled(category: str, enabled: bool) -> None:
    """Enable or disable a log category."""
    _category_enabled[category] = bool(enabled)


def reset_gates() -> None:
    """Re-enable every category."""
    for category in _category_enabled:
        _category_enabled[category] = True
