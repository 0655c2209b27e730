"""
Shared fixtures: a Mixamo-style skeleton plus stub collaborators.

Bone indices of MIXAMO_ROWS (targets follow at 22..25):
    0 Hips  1 Spine  2 Spine1  3 Spine2  4 Neck  5 Head
    6 LeftShoulder   7 LeftArm   8 LeftForeArm   9 LeftHand
   10 RightShoulder 11 RightArm 12 RightForeArm 13 RightHand
   14 LeftUpLeg     15 LeftLeg  16 LeftFoot     17 LeftToeBase
   18 RightUpLeg    19 RightLeg 20 RightFoot    21 RightToeBase
"""

import numpy as np
import pytest

from Exp_AutoIK.developer.dev_debug_gate import reset_gates
from Exp_AutoIK.developer.dev_logger import start_session
from Exp_AutoIK.engine.skeleton import AxisResult, BoneMapping, make_skeleton

MIXAMO_ROWS = [
    ("Hips", None, (0, 100, 0)),
    ("Spine", "Hips", (0, 10, 0)),
    ("Spine1", "Spine", (0, 10, 0)),
    ("Spine2", "Spine1", (0, 10, 0)),
    ("Neck", "Spine2", (0, 15, 0)),
    ("Head", "Neck", (0, 10, 0)),
    ("LeftShoulder", "Spine2", (5, 10, 0)),
    ("LeftArm", "LeftShoulder", (0, 12, 0)),
    ("LeftForeArm", "LeftArm", (0, 25, 0)),
    ("LeftHand", "LeftForeArm", (0, 25, 0)),
    ("RightShoulder", "Spine2", (-5, 10, 0)),
    ("RightArm", "RightShoulder", (0, 12, 0)),
    ("RightForeArm", "RightArm", (0, 25, 0)),
    ("RightHand", "RightForeArm", (0, 25, 0)),
    ("LeftUpLeg", "Hips", (10, -5, 0)),
    ("LeftLeg", "LeftUpLeg", (0, -40, 0)),
    ("LeftFoot", "LeftLeg", (0, -40, 0)),
    ("LeftToeBase", "LeftFoot", (0, -5, 10)),
    ("RightUpLeg", "Hips", (-10, -5, 0)),
    ("RightLeg", "RightUpLeg", (0, -40, 0)),
    ("RightFoot", "RightLeg", (0, -40, 0)),
    ("RightToeBase", "RightFoot", (0, -5, 10)),
]

MIXAMO_ROLES = {
    "hips": "Hips",
    "spine": "Spine",
    "chest": "Spine2",
    "neck": "Neck",
    "head": "Head",
    "leftShoulder": "LeftShoulder",
    "leftUpperArm": "LeftArm",
    "leftLowerArm": "LeftForeArm",
    "leftHand": "LeftHand",
    "rightShoulder": "RightShoulder",
    "rightUpperArm": "RightArm",
    "rightLowerArm": "RightForeArm",
    "rightHand": "RightHand",
    "leftUpperLeg": "LeftUpLeg",
    "leftLowerLeg": "LeftLeg",
    "leftFoot": "LeftFoot",
    "leftToeBase": "LeftToeBase",
    "rightUpperLeg": "RightUpLeg",
    "rightLowerLeg": "RightLeg",
    "rightFoot": "RightFoot",
    "rightToeBase": "RightToeBase",
}


class StubMapper:
    """Maps roles from a fixed role -> bone name table."""

    def __init__(self, roles=None, complete=True, platform_name="Mixamo"):
        self.roles = dict(MIXAMO_ROLES if roles is None else roles)
        self.complete = complete
        self.platform_name = platform_name
        self.calls = 0

    def map(self, bones):
        self.calls += 1
        by_name = {b.name: b for b in bones}
        mapped = {role: by_name[name] for role, name in self.roles.items() if name in by_name}
        return BoneMapping(complete=self.complete, platform_name=self.platform_name, bones=mapped)


class StubDetector:
    """Returns the same axis for every bone."""

    def __init__(self, axis="x", direction=(1.0, 0.0, 0.0), confidence=0.9):
        self.axis = axis
        self.direction = direction
        self.confidence = confidence
        self.calls = []

    def detect_primary_axis(self, bone):
        self.calls.append(bone.name)
        return AxisResult(
            axis=self.axis,
            direction=np.array(self.direction, dtype=np.float32),
            confidence=self.confidence,
        )


@pytest.fixture(autouse=True)
def fresh_log():
    """Every test starts with an empty log buffer and all categories on."""
    reset_gates()
    start_session()
    yield
    reset_gates()


@pytest.fixture
def mixamo_bones():
    return make_skeleton(MIXAMO_ROWS)


@pytest.fixture
def mapper():
    return StubMapper()


@pytest.fixture
def detector():
    return StubDetector()


@pytest.fixture
def make_mapper():
    return StubMapper


@pytest.fixture
def make_detector():
    return StubDetector
