"""
Tests for swing-twist constraint synthesis.
"""

import math

import numpy as np
import pytest

from Exp_AutoIK.developer.dev_logger import get_log
from Exp_AutoIK.engine.biomechanics import BiomechanicalEntry, default_table, BALL, HINGE
from Exp_AutoIK.engine.constraints import (
    ConstraintDescriptor,
    create_ball_constraint,
    create_from_biomechanics,
    create_hinge_constraint,
)
from Exp_AutoIK.engine.skeleton import MalformedCollaboratorResponse


def test_knee_from_biomechanics():
    """Knee: twist [-0, 130deg], swing 5deg"""
    c = create_from_biomechanics("knee", (1, 0, 0))
    assert c.type == "hinge"
    assert np.allclose(c.twist_axis, [1, 0, 0])
    assert c.twist_min == 0.0
    assert c.twist_max == pytest.approx(2.2689, abs=1e-4)
    assert c.swing_radius == pytest.approx(0.0873, abs=1e-4)


def test_elbow_from_biomechanics():
    c = create_from_biomechanics("elbow", (0, 0, 1))
    assert c.type == "hinge"
    assert c.twist_max == pytest.approx(math.radians(140))
    assert c.swing_radius == pytest.approx(math.radians(3))


def test_hip_from_biomechanics():
    """Ball: twist is +/- rotation, swing is flexion"""
    c = create_from_biomechanics("hip", (0, 1, 0))
    assert c.type == "ball"
    assert c.twist_min == pytest.approx(-math.radians(45))
    assert c.twist_max == pytest.approx(math.radians(45))
    assert c.swing_radius == pytest.approx(math.radians(100))


def test_universal_joint_gives_none():
    assert create_from_biomechanics("ankle", (1, 0, 0)) is None
    assert create_from_biomechanics("wrist", (1, 0, 0)) is None


def test_unknown_joint_gives_none_and_warns():
    assert create_from_biomechanics("tail", (1, 0, 0)) is None
    warnings = [e for e in get_log("CONSTRAINT") if e["level"] == "WARNING"]
    assert any("tail" in e["message"] for e in warnings)


def test_axis_is_normalized():
    c = create_hinge_constraint((0, 3, 0))
    assert np.allclose(c.twist_axis, [0, 1, 0])
    assert c.twist_axis.dtype == np.float32


def test_zero_axis_raises():
    with pytest.raises(MalformedCollaboratorResponse):
        create_hinge_constraint((0, 0, 0))


def test_non_3d_axis_raises():
    with pytest.raises(MalformedCollaboratorResponse):
        create_ball_constraint((1, 0))


def test_hinge_defaults():
    c = create_hinge_constraint((1, 0, 0))
    assert c.twist_max == pytest.approx(math.radians(130))
    assert c.swing_radius == pytest.approx(math.radians(5))
    assert c.is_well_formed


def test_ball_defaults():
    c = create_ball_constraint((1, 0, 0))
    assert c.twist_min == pytest.approx(-math.pi / 2)
    assert c.twist_max == pytest.approx(math.pi / 2)
    assert c.swing_radius == pytest.approx(math.pi / 2)


def test_negative_extension_is_returned_with_warning():
    """A hinge whose range excludes zero is flagged, not rejected"""
    c = create_hinge_constraint((1, 0, 0), flexion=90, extension=-10)
    assert not c.is_well_formed
    assert c.twist_min == pytest.approx(math.radians(10))
    assert any(e["level"] == "WARNING" for e in get_log("CONSTRAINT"))


def test_custom_table_is_used():
    table = default_table().with_entries(
        BiomechanicalEntry("knee", BALL, {"rotation": 10, "flexion": 20})
    )
    c = create_from_biomechanics("knee", (1, 0, 0), table)
    assert c.type == "ball"
    assert c.twist_max == pytest.approx(math.radians(10))


def test_missing_fields_use_defaults():
    table = default_table().with_entries(BiomechanicalEntry("knee", "hinge", {}))
    c = create_from_biomechanics("knee", (1, 0, 0), table)
    assert c.twist_max == pytest.approx(math.radians(130))
    assert c.swing_radius == pytest.approx(math.radians(5))


def test_to_dict_and_back():
    c = create_from_biomechanics("knee", (1, 0, 0))
    data = c.to_dict()
    assert data["type"] == "hinge"
    assert data["twistAxis"] == (1.0, 0.0, 0.0)
    assert ConstraintDescriptor.from_dict(data).to_dict() == data


SWING_TWIST_JOINTS = [
    name for name in default_table().names
    if default_table().lookup(name).kind in (HINGE, BALL)
]


@pytest.mark.parametrize("joint", SWING_TWIST_JOINTS)
def test_every_table_entry_maps_its_own_limits(joint):
    """Hinge: [-extension, flexion] / wiggle; ball: +/- rotation / flexion"""
    entry = default_table().lookup(joint)
    c = create_from_biomechanics(joint, (1, 0, 0))

    assert c.type == entry.kind
    assert c.is_well_formed
    if entry.kind == HINGE:
        assert c.twist_min == pytest.approx(-math.radians(entry.get("extension")))
        assert c.twist_max == pytest.approx(math.radians(entry.get("flexion")))
        assert c.swing_radius == pytest.approx(math.radians(entry.get("wiggle")))
    else:
        assert c.twist_min == pytest.approx(-math.radians(entry.get("rotation")))
        assert c.twist_max == pytest.approx(math.radians(entry.get("rotation")))
        assert c.swing_radius == pytest.approx(math.radians(entry.get("flexion")))


def test_table_covers_all_swing_twist_joints():
    assert sorted(SWING_TWIST_JOINTS) == ["elbow", "hip", "knee", "shoulder"]


def test_shoulder_from_biomechanics():
    c = create_from_biomechanics("shoulder", (1, 0, 0))
    assert c.type == "ball"
    assert c.twist_min == pytest.approx(-math.radians(80))
    assert c.twist_max == pytest.approx(math.radians(80))
    assert c.swing_radius == pytest.approx(math.radians(170))


def test_warn_callback_receives_problems():
    """Warnings go to the callback instead of the dev logger"""
    seen = []

    def warn(category, text):
        seen.append((category, text))

    assert create_from_biomechanics("tail", (1, 0, 0), warn=warn) is None
    assert create_from_biomechanics("ankle", (1, 0, 0), warn=warn) is None

    assert [cat for cat, _ in seen] == ["CONSTRAINT", "CONSTRAINT"]
    assert "tail" in seen[0][1]
    assert "universal" in seen[1][1]
    assert get_log("CONSTRAINT") == []


def test_warn_callback_unused_for_valid_joint():
    seen = []
    create_from_biomechanics("knee", (1, 0, 0), warn=lambda cat, text: seen.append(text))
    assert seen == []
