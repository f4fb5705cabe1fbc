"""
Tests for random colour sampling and distinct palette generation.
"""

import itertools

import pytest

from iris_boundary import is_srgb
from iris_colors import SRGB, AppearanceSpace, Color
from iris_errors import UnsupportedTargetError
from iris_metrics import perceptual_distance
from iris_palette import random_color, random_palette
from iris_viewing import get_standard_conditions

SPACE = AppearanceSpace(get_standard_conditions("default"))


def test_random_color_is_in_gamut():
    for seed in range(5):
        c = random_color(SPACE, rng=seed)
        assert c.space == SPACE
        assert is_srgb(c)


def test_random_color_gives_up():
    with pytest.raises(RuntimeError):
        random_color(SPACE, rng=0, predicate=lambda c: False, max_attempts=5)


def test_palette_is_distinct_and_in_gamut():
    palette = random_palette(4, SPACE, candidates=20, rng=42)
    assert len(palette) == 4
    assert all(is_srgb(c) for c in palette)
    for a, b in itertools.combinations(palette, 2):
        assert perceptual_distance(a, b) > 1.0


def test_palette_is_reproducible():
    first = random_palette(3, SPACE, candidates=15, rng=7)
    second = random_palette(3, SPACE, candidates=15, rng=7)
    assert first == second


def test_palette_avoids_occupied_colours():
    occupied = [Color((0.9, 0.1, 0.1), SRGB), Color((0.1, 0.1, 0.9), SRGB)]
    palette = random_palette(2, SPACE, occupied=occupied, candidates=20, rng=3)
    assert len(palette) == 2
    for c in palette:
        for o in occupied:
            assert perceptual_distance(c, o) > 1.0


def test_palette_arguments():
    assert random_palette(0, SPACE, rng=1) == []
    with pytest.raises(ValueError):
        random_palette(-1, SPACE)
    with pytest.raises(ValueError):
        random_palette(2, SPACE, candidates=0)
    with pytest.raises(UnsupportedTargetError):
        random_palette(2, SPACE.cartesian_form())
