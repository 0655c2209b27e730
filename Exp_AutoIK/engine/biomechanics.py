# Exp_AutoIK/engine/biomechanics.py
"""
Biomechanical Range-of-Motion Table.

Per joint (knee, elbow, hip, shoulder, ankle, wrist): the joint kind and its
maximum flexion/extension/abduction/etc. in degrees, from anatomical
range-of-motion studies.

Format of the raw data: {joint_name: {"type": kind, <limit_name>: degrees, ...}}
All values in degrees.

The table is an immutable value. Consumers receive it explicitly; new joints
are added by building a new table with with_entries().
"""

import json
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from ..autoik_config import BIOMECHANICS_FILE_NAME
from ..developer.dev_logger import log_ik

# Joint kinds
HINGE = "hinge"
BALL = "ball"
UNIVERSAL = "universal"

ENTRY_KINDS = (HINGE, BALL, UNIVERSAL)


# =============================================================================
# DEFAULT RANGE OF MOTION
# =============================================================================

DEFAULT_BIOMECHANICS: Dict[str, Dict[str, Any]] = {
    # Hinges
    "knee": {
        "type": "hinge",
        "flexion": 130,         # Medical max: 135-150, safe: 130
        "extension": 0,         # No hyperextension
        "wiggle": 5,            # Secondary axis freedom
        "anatomicalMax": 150,
    },
    "elbow": {
        "type": "hinge",
        "flexion": 140,         # Medical max: 145-150, safe: 140
        "extension": 0,
        "wiggle": 3,            # Tighter than the knee
        "anatomicalMax": 150,
    },

    # Balls
    "hip": {
        "type": "ball",
        "flexion": 100,         # Knee to chest
        "extension": 15,        # Leg behind body
        "abduction": 40,        # Away from midline
        "adduction": 25,        # Across midline
        "rotation": 45,         # Internal/external
    },
    "shoulder": {
        "type": "ball",
        "flexion": 170,         # Arm overhead forward
        "extension": 50,        # Arm behind back
        "abduction": 160,       # Arm overhead sideways
        "adduction": 40,        # Arm across chest
        "rotation": 80,
    },

    # Universals
    "ankle": {
        "type": "universal",
        "dorsiflexion": 20,     # Toes up
        "plantarflexion": 45,   # Point toes
        "inversion": 25,        # Sole inward
        "eversion": 15,         # Sole outward
    },
    "wrist": {
        "type": "universal",
        "flexion": 80,          # Palm toward forearm
        "extension": 70,
        "radialDeviation": 20,  # Thumb side up
        "ulnarDeviation": 35,   # Pinky side up
    },
}


# =============================================================================
# ENTRY
# =============================================================================

@dataclass(frozen=True)
class BiomechanicalEntry:
    """
    Range of motion for one joint.

    Attributes:
        name: Joint key ("knee", "hip", ...)
        kind: "hinge", "ball" or "universal"
        limits: Read-only {limit_name: degrees}, every value >= 0
        anatomical_max: Optional absolute anatomical maximum (degrees)
    """
    name: str
    kind: str
    limits: Mapping[str, float] = field(default_factory=dict)
    anatomical_max: Optional[float] = None

    def __post_init__(self):
        if self.kind not in ENTRY_KINDS:
            raise ValueError(f"Joint '{self.name}': unknown kind '{self.kind}'")

        checked = {}
        for limit_name, degrees in self.limits.items():
            if isinstance(degrees, bool) or not isinstance(degrees, (int, float)):
                raise ValueError(f"Joint '{self.name}': limit '{limit_name}' is not a number")
            if degrees < 0:
                raise ValueError(
                    f"Joint '{self.name}': limit '{limit_name}' must be >= 0 (got {degrees})"
                )
            checked[limit_name] = float(degrees)

        object.__setattr__(self, 'limits', MappingProxyType(checked))

    def get(self, limit_name: str, default: Optional[float] = None) -> Optional[float]:
        """Degrees for a named limit, or default if the entry lacks it."""
        return self.limits.get(limit_name, default)

    def to_dict(self) -> Dict[str, Any]:
        """Raw-data form (same shape as DEFAULT_BIOMECHANICS values)."""
        data: Dict[str, Any] = {"type": self.kind}
        data.update(self.limits)
        if self.anatomical_max is not None:
            data["anatomicalMax"] = self.anatomical_max
        return data

    @staticmethod
    def from_dict(name: str, data: Mapping[str, Any]) -> 'BiomechanicalEntry':
        """Build from a raw-data dict."""
        if "type" not in data:
            raise ValueError(f"Joint '{name}': missing 'type'")
        limits = {k: v for k, v in data.items() if k not in ("type", "anatomicalMax")}
        return BiomechanicalEntry(
            name=name,
            kind=data["type"],
            limits=limits,
            anatomical_max=data.get("anatomicalMax"),
        )


# =============================================================================
# TABLE
# =============================================================================

class BiomechanicalTable:
    """
    Immutable joint-name -> BiomechanicalEntry lookup.

    Usage:
        table = default_table()
        knee = table.lookup("knee")
        custom = table.with_entries(BiomechanicalEntry("neck", "ball", {...}))
    """

    __slots__ = ('_entries',)

    def __init__(self, entries: Mapping[str, BiomechanicalEntry]):
        self._entries = MappingProxyType({k.lower(): v for k, v in entries.items()})

    def lookup(self, joint_name: str) -> Optional[BiomechanicalEntry]:
        """Entry for a joint name (case-insensitive), or None if unknown."""
        if not joint_name:
            return None
        return self._entries.get(joint_name.lower())

    def __contains__(self, joint_name: str) -> bool:
        return self.lookup(joint_name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def names(self):
        """Joint names in table order."""
        return list(self._entries.keys())

    def with_entries(self, *entries: BiomechanicalEntry) -> 'BiomechanicalTable':
        """New table with entries added or replaced. This table is unchanged."""
        merged = dict(self._entries)
        for entry in entries:
            merged[entry.name.lower()] = entry
        return BiomechanicalTable(merged)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: entry.to_dict() for name, entry in self._entries.items()}

    @staticmethod
    def from_dict(data: Mapping[str, Mapping[str, Any]]) -> 'BiomechanicalTable':
        """
        Build a table from raw data.

        Raises:
            ValueError: on a malformed entry (unknown kind, negative limit, ...)
        """
        return BiomechanicalTable({
            name: BiomechanicalEntry.from_dict(name, entry)
            for name, entry in data.items()
        })


_DEFAULT_TABLE: Optional[BiomechanicalTable] = None


def default_table() -> BiomechanicalTable:
    """The shared default table (built once, read-only afterwards)."""
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = BiomechanicalTable.from_dict(DEFAULT_BIOMECHANICS)
    return _DEFAULT_TABLE


# =============================================================================
# FILE I/O (custom tables saved next to a rig)
# =============================================================================

def biomechanics_path(path: str) -> str:
    """A directory resolves to BIOMECHANICS_FILE_NAME inside it; a file path is kept."""
    if os.path.isdir(path):
        return os.path.join(path, BIOMECHANICS_FILE_NAME)
    return path


def save_biomechanics_to_file(table: BiomechanicalTable, filepath: str) -> bool:
    """
    Save a table to JSON. Returns False (and logs) on an I/O error.

    filepath may be a rig directory; the table then goes to
    BIOMECHANICS_FILE_NAME inside it.
    """
    filepath = biomechanics_path(filepath)
    try:
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(table.to_dict(), f, indent=2)
        return True
    except OSError as e:
        log_ik("CONSTRAINT", f"Error saving biomechanics to {filepath}: {e}", level="ERROR")
        return False


def load_biomechanics_from_file(filepath: str) -> Optional[BiomechanicalTable]:
    """
    Load a table from JSON. filepath may be a rig directory (see
    save_biomechanics_to_file).

    Returns:
        The table, or None if the file is missing or unreadable.

    Raises:
        ValueError: if the file parses but holds malformed entries
    """
    filepath = biomechanics_path(filepath)
    if not os.path.exists(filepath):
        return None
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log_ik("CONSTRAINT", f"Error loading biomechanics from {filepath}: {e}", level="ERROR")
        return None
    return BiomechanicalTable.from_dict(data)
