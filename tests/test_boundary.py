"""
Tests for the gamut predicates and the boundary bisection.
"""

import logging

import numpy as np
import pytest

from iris_boundary import find_boundary, gamut_rings, is_srgb
from iris_colors import SRGB, XYZ, AppearanceSpace, Color
from iris_errors import UnsupportedTargetError
from iris_stimulus import srgb_to_xyz
from iris_viewing import get_standard_conditions

VC = get_standard_conditions("default")
JCH_SPACE = AppearanceSpace(VC)


def _chroma_below(limit):
    return lambda color: color[1] < limit


def test_is_srgb():
    assert is_srgb(Color((0.5, 0.5, 0.5), SRGB))
    assert not is_srgb(Color((1.2, 0.5, 0.5), SRGB))
    assert is_srgb(Color(tuple(srgb_to_xyz(np.ones(3))), XYZ))
    assert not is_srgb(Color((50.0, 150.0, 140.0), JCH_SPACE))


def test_find_boundary_synthetic_predicate():
    start = Color((50.0, 0.0, 120.0), JCH_SPACE)
    edge = find_boundary(start, 1, 0.0, 100.0, epsilon=0.01, predicate=_chroma_below(40.0))
    assert edge[1] < 40.0
    assert 40.0 - edge[1] < 0.1
    # other channels are untouched
    assert edge[0] == 50.0 and edge[2] == 120.0


def test_find_boundary_predicate_true_everywhere():
    start = Color((50.0, 0.0, 120.0), JCH_SPACE)
    edge = find_boundary(start, 1, 0.0, 30.0, epsilon=0.01, predicate=_chroma_below(40.0))
    assert 30.0 - edge[1] < 0.1


def test_find_boundary_in_srgb():
    start = Color((60.0, 0.0, 250.0), JCH_SPACE)
    edge = find_boundary(start, 1, 0.0, 150.0, epsilon=0.01)
    assert is_srgb(edge)
    assert edge[1] > 1.0
    assert not is_srgb(edge.with_values((60.0, edge[1] + 1.0, 250.0)))


def test_find_boundary_rejects_bad_start():
    start = Color((50.0, 0.0, 120.0), JCH_SPACE)
    with pytest.raises(ValueError):
        find_boundary(start, 1, 50.0, 100.0, 0.01, predicate=_chroma_below(40.0))
    with pytest.raises(ValueError):
        find_boundary(start, 1, 0.0, 100.0, 0.0, predicate=_chroma_below(40.0))
    with pytest.raises(ValueError):
        find_boundary(start, 3, 0.0, 100.0, 0.01, predicate=_chroma_below(40.0))


def test_find_boundary_depth_limit_warns(caplog):
    start = Color((50.0, 0.0, 120.0), JCH_SPACE)
    with caplog.at_level(logging.WARNING, logger="iris_boundary"):
        edge = find_boundary(start, 1, 0.0, 100.0, 1e-6, predicate=_chroma_below(40.0), max_depth=3)
    assert edge[1] < 40.0
    assert "depth limit" in caplog.text


def test_gamut_rings():
    rings = gamut_rings(JCH_SPACE, [40.0, 70.0], [0.0, 120.0, 240.0], epsilon=0.05)
    assert sorted(rings) == [40.0, 70.0]
    for level, ring in rings.items():
        assert len(ring) == 3
        for color in ring:
            assert color[0] == level
            assert color[1] > 0.0
            assert is_srgb(color)


def test_gamut_rings_needs_polar_space():
    with pytest.raises(UnsupportedTargetError):
        gamut_rings(JCH_SPACE.cartesian_form(), [50.0], [0.0])
