"""
Tests for shape handling, the sRGB device encoding and xyY helpers.
"""

import numpy as np
import pytest

from __about__ import __version__, metadata_summary, version_info
from iris_errors import ComponentCountMismatch
from iris_stimulus import (
    handle_shapes,
    srgb_in_range,
    srgb_out_of_range,
    srgb_to_xyz,
    xyY_to_xyz,
    xyz_to_srgb,
)


def test_srgb_white_is_d65():
    xyz = srgb_to_xyz(np.array([1.0, 1.0, 1.0]))
    np.testing.assert_allclose(xyz, [0.95047, 1.0, 1.08883], atol=1e-4)


def test_srgb_round_trip():
    rgb = np.random.default_rng(3).uniform(0.0, 1.0, size=(50, 3))
    np.testing.assert_allclose(xyz_to_srgb(srgb_to_xyz(rgb)), rgb, atol=1e-5)


def test_out_of_gamut_values_survive_round_trip():
    rgb = np.array([1.2, -0.1, 0.5])
    np.testing.assert_allclose(xyz_to_srgb(srgb_to_xyz(rgb)), rgb, atol=1e-5)


def test_clip_limits_to_unit_cube():
    rgb = xyz_to_srgb(srgb_to_xyz(np.array([1.2, -0.1, 0.5])), clip=True)
    assert np.all(rgb >= 0.0) and np.all(rgb <= 1.0)


def test_xyY_to_xyz():
    xyz = xyY_to_xyz(np.array([0.3127, 0.3290, 1.0]))
    np.testing.assert_allclose(xyz, [0.95046, 1.0, 1.08906], atol=1e-4)
    np.testing.assert_array_equal(xyY_to_xyz(np.array([0.3, 0.0, 1.0])), np.zeros(3))


def test_handle_shapes_preserves_rank():
    @handle_shapes
    def double(arr):
        return arr * 2.0

    assert double([1.0, 2.0, 3.0]).shape == (3,)
    assert double(np.ones((4, 3))).shape == (4, 3)


@pytest.mark.parametrize("shape", [(4,), (2, 2), (2, 3, 3)])
def test_handle_shapes_rejects_bad_input(shape):
    with pytest.raises(ComponentCountMismatch):
        srgb_to_xyz(np.zeros(shape))


def test_range_checks():
    assert srgb_in_range(np.array([0.0, 0.5, 1.0])) is True
    assert srgb_in_range(np.array([0.0, 0.5, 1.0 + 1e-7])) is False
    assert srgb_in_range(np.array([0.0, 0.5, 1.0 + 1e-7]), upper_tolerance=1e-6) is True
    assert srgb_out_of_range(np.array([-0.01, 0.5, 0.5])) is True
    mask = srgb_in_range(np.array([[0.2, 0.2, 0.2], [1.5, 0.2, 0.2]]))
    np.testing.assert_array_equal(mask, [True, False])
    np.testing.assert_array_equal(srgb_out_of_range(np.array([[0.2, 0.2, 0.2]])), [False])


def test_metadata_summary():
    meta = metadata_summary()
    assert meta["title"] == "Iris"
    assert meta["version"] == __version__
    assert version_info == (0, 1, 0)
    assert meta["url"].endswith("iris")
