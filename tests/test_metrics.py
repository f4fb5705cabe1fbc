"""
Tests for hue arithmetic and the appearance distance metrics.
"""

import numpy as np
import pytest

from iris_cam import Correlate, get_transform
from iris_colors import SRGB, XYZ, AppearanceSpace, Color, convert
from iris_correlates import JCH, JMh, QsH
from iris_errors import MismatchedConfiguration, UnsupportedTargetError
from iris_metrics import (
    NOMINAL_CHROMA,
    AppearanceMetrics,
    correlate_range,
    distance_cartesian,
    distance_polar,
    distance_ucs,
    hue_difference,
    hue_distance,
    perceptual_distance,
    ucs_coordinates,
)
from iris_viewing import get_standard_conditions

VC = get_standard_conditions("default")
JCH_SPACE = AppearanceSpace(VC)


@pytest.mark.parametrize("modulus", [360.0, 400.0])
def test_hue_laws(modulus):
    rng = np.random.default_rng(11)
    for h1, h2 in rng.uniform(-1000.0, 1000.0, size=(200, 2)):
        d = hue_difference(h1, h2, modulus)
        assert -modulus / 2 <= d <= modulus / 2
        assert 0.0 <= hue_distance(h1, h2, modulus) <= modulus / 2
        assert hue_distance(h1 + d, h2, modulus) < 1e-9
        assert hue_distance(h1, h2, modulus) == pytest.approx(hue_distance(h2, h1, modulus))
        assert hue_difference(h2, h1, modulus) == pytest.approx(-d)


@pytest.mark.parametrize("h1, h2, modulus", [
    (0.0, 180.0, 360.0),
    (10.0, 190.0, 360.0),
    (-90.0, 90.0, 360.0),
    (0.0, 200.0, 400.0),
    (350.0, 150.0, 400.0),
])
def test_hue_difference_is_antisymmetric_at_half_turn(h1, h2, modulus):
    d = hue_difference(h1, h2, modulus)
    assert abs(d) == modulus / 2
    assert hue_difference(h2, h1, modulus) == -d
    assert hue_distance(h1, h2, modulus) == modulus / 2


def test_correlate_ranges():
    assert correlate_range(Correlate.J, VC) == 100.0
    assert correlate_range(Correlate.C, VC) == NOMINAL_CHROMA
    assert correlate_range(Correlate.M, VC) == pytest.approx(NOMINAL_CHROMA * VC.fl4)
    assert correlate_range(Correlate.Q, VC) == pytest.approx(
        get_transform(VC).brightness_from_lightness(100.0))
    assert correlate_range(Correlate.h, VC) == 360.0
    assert correlate_range(Correlate.H, VC) == 400.0


# --- Array API ---

def test_ucs_round_trip():
    jmh = np.array([[50.0, 30.0, 120.0], [80.0, 5.0, 300.0], [20.0, 60.0, 10.0]])
    ucs = AppearanceMetrics.jmh_to_ucs(jmh)
    np.testing.assert_allclose(AppearanceMetrics.ucs_to_jmh(ucs), jmh, atol=1e-9)


def test_ucs_hue_stays_below_full_turn():
    h = AppearanceMetrics.ucs_to_jmh(np.array([50.0, 10.0, -1e-15]))[2]
    assert 0.0 <= h < 360.0


def test_ucs_lightness_scale():
    ucs = AppearanceMetrics.jmh_to_ucs(np.array([100.0, 0.0, 0.0]))
    assert ucs[0] == pytest.approx(100.0)


def test_delta_e_ucs_broadcasts():
    ref = np.array([50.0, 20.0, 90.0])
    samples = np.array([[50.0, 20.0, 90.0], [55.0, 20.0, 90.0], [50.0, 25.0, 95.0]])
    res = AppearanceMetrics.delta_E_ucs(ref, samples)
    assert res.shape == (3,)
    assert res[0] == pytest.approx(0.0, abs=1e-12)
    assert np.all(res[1:] > 0.0)
    np.testing.assert_allclose(res, AppearanceMetrics.delta_E_ucs(samples, ref))
    assert isinstance(AppearanceMetrics.delta_E_ucs(ref, samples[1]), float)


def test_delta_e_shapes_must_match():
    with pytest.raises(ValueError):
        AppearanceMetrics.delta_E_ucs(np.ones((2, 3)), np.ones((3, 3)))


def test_delta_e_euclidean_weights():
    d = AppearanceMetrics.delta_E_euclidean([50.0, 3.0, 4.0], [60.0, 0.0, 0.0],
                                            lightness_weight=0.0, colorfulness_weight=2.0)
    assert d == pytest.approx(5.0)


def test_weights_need_a_positive_entry():
    with pytest.raises(ValueError):
        AppearanceMetrics.delta_E_ucs([50.0, 1.0, 1.0], [50.0, 2.0, 2.0], 0.0, 0.0)


# --- Colour-level distances ---

def test_distance_cartesian():
    space = JCH_SPACE.cartesian_form()
    a = Color((50.0, 3.0, 4.0), space)
    b = Color((50.0, 0.0, 0.0), space)
    assert distance_cartesian(a, b) == pytest.approx(5.0)
    with pytest.raises(UnsupportedTargetError):
        distance_polar(a, b)


def test_distance_polar_normalises_by_range():
    a = Color((40.0, 20.0, 100.0), JCH_SPACE)
    b = Color((50.0, 20.0, 100.0), JCH_SPACE)
    assert distance_polar(a, b) == pytest.approx(0.1)
    with pytest.raises(UnsupportedTargetError):
        distance_cartesian(a, b)


def test_distance_polar_wraps_hue():
    a = Color((50.0, 20.0, 350.0), JCH_SPACE)
    b = Color((50.0, 20.0, 10.0), JCH_SPACE)
    c = Color((50.0, 20.0, 30.0), JCH_SPACE)
    assert distance_polar(a, b) == pytest.approx(distance_polar(b, c))
    assert distance_polar(a, b, hue_weight=0.0) == pytest.approx(0.0)


def test_distance_polar_hue_composition():
    space = AppearanceSpace(VC, JCH)
    a = Color((50.0, 20.0, 390.0), space)
    b = Color((50.0, 20.0, 10.0), space)
    assert distance_polar(a, b) == pytest.approx(20.0 / 400.0)


def test_distance_ucs_properties():
    a = convert(Color((0.8, 0.3, 0.2), SRGB), JCH_SPACE)
    b = convert(Color((0.7, 0.35, 0.25), SRGB), JCH_SPACE)
    assert distance_ucs(a, a) == pytest.approx(0.0, abs=1e-9)
    assert distance_ucs(a, b) == pytest.approx(distance_ucs(b, a))
    assert distance_ucs(a, b) > 0.0


def test_distance_ucs_is_configuration_independent():
    a = convert(Color((0.8, 0.3, 0.2), SRGB), JCH_SPACE)
    b = convert(Color((0.2, 0.5, 0.9), SRGB), JCH_SPACE)
    qsh = AppearanceSpace(VC, QsH)
    assert distance_ucs(convert(a, qsh), convert(b, qsh)) == pytest.approx(distance_ucs(a, b), abs=1e-6)


def test_distance_requires_same_space():
    a = Color((50.0, 20.0, 10.0), JCH_SPACE)
    with pytest.raises(MismatchedConfiguration):
        distance_ucs(a, Color((50.0, 20.0, 10.0), AppearanceSpace(VC, JMh)))
    with pytest.raises(UnsupportedTargetError):
        distance_ucs(Color((0.1, 0.1, 0.1), XYZ), Color((0.2, 0.2, 0.2), XYZ))


def test_perceptual_distance_across_spaces():
    rgb = Color((0.1, 0.6, 0.4), SRGB)
    same = convert(rgb, AppearanceSpace(get_standard_conditions("adobe_rgb"), QsH))
    assert perceptual_distance(rgb, same) == pytest.approx(0.0, abs=1e-5)
    other = Color((0.1, 0.6, 0.5), SRGB)
    assert perceptual_distance(rgb, other) > 1.0
    with pytest.raises(UnsupportedTargetError):
        perceptual_distance(rgb, other, SRGB)


def test_triangle_inequality_for_small_steps():
    base = np.array([0.4, 0.5, 0.6])
    a, b, c = (Color(tuple(base + d), SRGB) for d in (0.0, 0.01, 0.02))
    ab, bc, ac = perceptual_distance(a, b), perceptual_distance(b, c), perceptual_distance(a, c)
    assert ac <= ab + bc + 1e-9


def test_ucs_coordinates():
    c = Color((50.0, 0.0, 123.0), AppearanceSpace(VC, JMh))
    J_p, a_p, b_p = ucs_coordinates(c)
    assert a_p == pytest.approx(0.0) and b_p == pytest.approx(0.0)
    assert J_p == pytest.approx(1.7 * 50.0 / 1.35)
    with pytest.raises(UnsupportedTargetError):
        ucs_coordinates(Color((0.5, 0.5, 0.5), SRGB))
