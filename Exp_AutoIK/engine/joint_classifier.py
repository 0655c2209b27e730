# Exp_AutoIK/engine/joint_classifier.py
"""
Joint Classification from bone names.

Two independent classifiers:

classify_kind(name)
    Coarse joint kind: "hinge", "ball", "universal" or "unknown".
    Used to pick the constraint type.

classify_biomechanical(name)
    Specific range-of-motion entry: "knee", "elbow", "hip", "shoulder",
    "ankle", "wrist" or None. Used to pick the numbers.

Both are ordered rule tables, evaluated top to bottom, first match wins.
THE ORDER IS PART OF THE CONTRACT. Bone names overlap ("UpperLeg" contains
"leg"), so the most specific rules come first:

    KIND_RULES:          hinge -> universal -> ball
    BIOMECHANICAL_RULES: knee -> elbow -> hip -> shoulder -> ankle -> wrist

The two tables do NOT always agree (Mixamo "LeftLeg" is a hinge, but has no
biomechanical entry). They are kept separate on purpose;
classification_disagreement() reports the cases where they differ.

Matching is case-insensitive substring matching - rig names embed prefixes,
suffixes and side markers ("mixamorig:LeftForeArm", "J_Bip_L_LowerLeg").
"""

import re
from typing import Callable, NamedTuple, Optional, Tuple

from .biomechanics import BiomechanicalTable, default_table

# Joint kinds
HINGE = "hinge"
BALL = "ball"
UNIVERSAL = "universal"
UNKNOWN = "unknown"

JOINT_KINDS = (HINGE, BALL, UNIVERSAL, UNKNOWN)


class ClassificationRule(NamedTuple):
    """One (predicate, result) row of a rule table."""
    predicate: Callable[[str], bool]   # Receives the lower-cased name
    result: str
    description: str


def _matches(pattern: str) -> Callable[[str], bool]:
    regex = re.compile(pattern, re.IGNORECASE)
    return lambda name: regex.search(name) is not None


def _matches_except(pattern: str, exclude: str) -> Callable[[str], bool]:
    regex = re.compile(pattern, re.IGNORECASE)
    excluded = re.compile(exclude, re.IGNORECASE)
    return lambda name: regex.search(name) is not None and excluded.search(name) is None


# =============================================================================
# RULE TABLES
# =============================================================================

KIND_RULES: Tuple[ClassificationRule, ...] = (
    # Hinges FIRST - most specific
    ClassificationRule(_matches(r"knee|shin|calf|elbow|forearm|lowerarm"), HINGE,
                       "knee/shin/calf/elbow/forearm/lowerarm"),
    ClassificationRule(_matches_except(r"leg", r"up|upper|thigh"), HINGE,
                       "leg, but not up/upper/thigh"),

    # Universals BEFORE balls
    ClassificationRule(_matches(r"ankle|foot|toe|wrist|hand|finger|thumb"), UNIVERSAL,
                       "ankle/foot/toe/wrist/hand/finger/thumb"),

    # Balls LAST - most general
    ClassificationRule(
        _matches(r"hip|thigh|upperleg|upleg|shoulder|upperarm|clavicle|neck|head|spine|chest"),
        BALL,
        "hip/thigh/upperleg/upleg/shoulder/upperarm/clavicle/neck/head/spine/chest"),
)

BIOMECHANICAL_RULES: Tuple[ClassificationRule, ...] = (
    # Hinge joints
    ClassificationRule(_matches(r"knee|shin|lowerleg|calf"), "knee", "knee/shin/lowerleg/calf"),
    ClassificationRule(_matches(r"elbow|lowerarm|forearm"), "elbow", "elbow/lowerarm/forearm"),

    # Ball joints
    ClassificationRule(_matches(r"hip|thigh|upperleg"), "hip", "hip/thigh/upperleg"),
    ClassificationRule(_matches(r"shoulder|upperarm|clavicle"), "shoulder",
                       "shoulder/upperarm/clavicle"),

    # Universal joints
    ClassificationRule(_matches(r"ankle|foot"), "ankle", "ankle/foot"),
    ClassificationRule(_matches(r"wrist|hand"), "wrist", "wrist/hand"),
)


def _first_match(rules: Tuple[ClassificationRule, ...], identifier: str) -> Optional[str]:
    name = identifier.lower()
    for rule in rules:
        if rule.predicate(name):
            return rule.result
    return None


# =============================================================================
# CLASSIFIERS
# =============================================================================

def classify_kind(identifier: str) -> str:
    """
    Coarse joint kind of a bone.

    Args:
        identifier: Bone name

    Returns:
        "hinge", "ball", "universal" or "unknown" (never None)
    """
    if not identifier:
        return UNKNOWN
    return _first_match(KIND_RULES, identifier) or UNKNOWN


def classify_biomechanical(identifier: str) -> Optional[str]:
    """
    Biomechanical entry for a bone.

    Args:
        identifier: Bone name

    Returns:
        "knee", "elbow", "hip", "shoulder", "ankle", "wrist", or None
    """
    if not identifier:
        return None
    return _first_match(BIOMECHANICAL_RULES, identifier)


def classification_disagreement(
    identifier: str,
    table: Optional[BiomechanicalTable] = None
) -> Optional[Tuple[str, Optional[str]]]:
    """
    Compare the two classifiers on one bone name.

    The kind implied by classify_biomechanical is the kind of its table
    entry ("unknown" when there is none).

    Returns:
        None if they agree, else (classify_kind result, biomechanical key)
    """
    if table is None:
        table = default_table()

    kind = classify_kind(identifier)
    joint = classify_biomechanical(identifier)
    entry = table.lookup(joint) if joint else None
    implied = entry.kind if entry else UNKNOWN

    if kind == implied:
        return None
    return kind, joint
