"""
Tests for viewing conditions: derived adaptation constants, input
validation and the standard environments.
"""

import numpy as np
import pytest

from iris_cam import forward
from iris_errors import InvalidViewingConditions
from iris_viewing import (
    ILLUMINANT_D65,
    ILLUMINANT_E,
    ILLUMINANT_F11,
    STANDARD_CONDITIONS,
    SURROUND_AVERAGE,
    SURROUND_DARK,
    SURROUND_DIM,
    Surround,
    ViewingConditions,
    get_standard_conditions,
)


def test_bright_conditions_constants():
    # D65, L_A = 318.31 cd/m², Y_b = 20, average surround
    vc = ViewingConditions(ILLUMINANT_D65, 318.31, 20.0, SURROUND_AVERAGE)
    assert vc.f_l == pytest.approx(1.16754, abs=1e-5)
    assert vc.d == pytest.approx(0.994468, abs=1e-5)
    assert vc.n == pytest.approx(0.2)
    assert vc.z == pytest.approx(1.927213, abs=1e-6)
    assert vc.n_bb == pytest.approx(1.000304, abs=1e-6)
    assert vc.n_cb == vc.n_bb
    assert vc.fl4 == pytest.approx(vc.f_l ** 0.25)


def test_worked_example_luminance_factor():
    vc = ViewingConditions((98.88, 90.0, 32.03), 200.0, 18.0, "average")
    # 5·L_A = 1000, so F_L collapses to 0.1·1000^(1/3)
    assert vc.f_l == pytest.approx(1.0, abs=1e-6)
    assert vc.n == pytest.approx(0.2)
    assert vc.white_luminance == 90.0


def test_full_adaptation_sets_d_to_one():
    vc = ViewingConditions(ILLUMINANT_D65, 4.0, 20.0, adaptation="full")
    assert vc.d == 1.0
    partial = ViewingConditions(ILLUMINANT_D65, 4.0, 20.0)
    assert 0.0 < partial.d < 1.0


@pytest.mark.parametrize("adaptation", ["partial", "full"])
@pytest.mark.parametrize("white", [ILLUMINANT_D65, ILLUMINANT_E, ILLUMINANT_F11])
def test_adopted_white_has_lightness_100(white, adaptation):
    vc = ViewingConditions(white, 40.0, 20.0, adaptation=adaptation)
    out = forward(np.asarray(white) / 100.0, vc)
    assert out[0] == pytest.approx(100.0, abs=1e-4)


def test_surround_by_name_is_normalised():
    vc = ViewingConditions(ILLUMINANT_D65, 64.0, 20.0, "Dim")
    assert vc.surround is SURROUND_DIM
    assert Surround.from_name("dark") is SURROUND_DARK


def test_equality_ignores_input_types():
    a = ViewingConditions(ILLUMINANT_D65, 64, 20, "average")
    b = ViewingConditions(list(ILLUMINANT_D65), 64.0, 20.0, SURROUND_AVERAGE)
    assert a == b
    assert hash(a) == hash(b)
    assert a != ViewingConditions(ILLUMINANT_D65, 64.0, 21.0)


def test_conditions_are_immutable():
    vc = get_standard_conditions()
    with pytest.raises(AttributeError):
        vc.adapting_luminance = 10.0


@pytest.mark.parametrize("kwargs", [
    dict(adapting_luminance=0.0),
    dict(adapting_luminance=-5.0),
    dict(adapting_luminance=float("nan")),
    dict(background_luminance=0.0),
    dict(background_luminance=float("inf")),
    dict(white_point=(95.0, 0.0, 108.0)),
    dict(white_point=(95.0, 100.0)),
    dict(white_point=(95.0, float("nan"), 108.0)),
    dict(surround="bright"),
    dict(surround=3),
    dict(adaptation="none"),
])
def test_invalid_inputs_are_rejected(kwargs):
    args = dict(white_point=ILLUMINANT_D65, adapting_luminance=64.0, background_luminance=20.0)
    args.update(kwargs)
    with pytest.raises(InvalidViewingConditions):
        ViewingConditions(**args)


def test_invalid_conditions_are_value_errors():
    with pytest.raises(ValueError):
        ViewingConditions(ILLUMINANT_D65, -1.0, 20.0)


def test_bright_background_warns():
    with pytest.warns(RuntimeWarning):
        ViewingConditions(ILLUMINANT_D65, 64.0, 150.0)


@pytest.mark.parametrize("name", sorted(STANDARD_CONDITIONS))
def test_standard_conditions_are_shared(name):
    vc = get_standard_conditions(name)
    assert vc is get_standard_conditions(name)
    white, L_A, Y_b, sur = STANDARD_CONDITIONS[name]
    assert vc.adapting_luminance == L_A
    assert vc.background_luminance == Y_b
    assert vc.surround == sur


def test_srgb_encoding_background():
    assert get_standard_conditions("srgb_encoding").background_luminance == pytest.approx(12.8)


def test_unknown_standard_conditions():
    with pytest.raises(InvalidViewingConditions):
        get_standard_conditions("cinema")
