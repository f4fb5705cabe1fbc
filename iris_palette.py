# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Distinct Palettes
=================
Greedy farthest-point palette generation.  For every new entry a pool of
random in-gamut candidates is drawn and the one with the largest minimum
CAM02-UCS distance to all colours already taken is kept.

Randomness comes from a ``numpy.random.Generator``; pass a seed for
reproducible palettes.
"""

import logging
import numpy as np
from scipy.spatial.distance import cdist
from typing import List, Optional, Sequence, Union

from iris_boundary import Predicate, is_srgb
from iris_colors import AppearanceSpace, Color, convert
from iris_errors import UnsupportedTargetError
from iris_metrics import correlate_range, ucs_coordinates

__all__ = [
    "random_color",
    "random_palette",
]

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.Generator]


def _check_polar(space: AppearanceSpace) -> None:
    if not isinstance(space, AppearanceSpace) or space.cartesian:
        raise UnsupportedTargetError("Palettes are drawn in a polar appearance space")

def random_color(space: AppearanceSpace, rng: SeedLike = None,
                 predicate: Predicate = is_srgb, max_attempts: int = 10_000) -> Color:
    """
    Uniform random colour inside the nominal correlate box of ``space``
    that satisfies ``predicate`` (rejection sampling).

    Raises:
        RuntimeError: If no accepted colour is found in ``max_attempts``.
    """
    _check_polar(space)
    rng = np.random.default_rng(rng)
    cfg, vc = space.configuration, space.conditions
    scale = np.array([correlate_range(cfg.lightness, vc),
                      correlate_range(cfg.chroma, vc),
                      cfg.hue_modulus])
    for _ in range(max_attempts):
        candidate = Color(tuple((rng.random(3) * scale).tolist()), space)
        if predicate(candidate):
            return candidate
    logger.warning("No colour accepted after %d random draws in %s", max_attempts, space.name)
    raise RuntimeError(f"No colour satisfying the predicate found in {max_attempts} draws")

def random_palette(count: int, space: AppearanceSpace, occupied: Sequence[Color] = (),
                   candidates: int = 1000, predicate: Predicate = is_srgb,
                   rng: SeedLike = None) -> List[Color]:
    """
    Generates ``count`` mutually distinct colours.

    Args:
        count: Number of colours to create.
        space: Polar appearance space the colours are drawn in.
        occupied: Colours already in use (any space); new colours keep
                  away from them.  They are not part of the result.
        candidates: Pool size drawn per palette entry.
        predicate: Gamut test for candidates, sRGB by default.
        rng: Seed or generator.

    Returns:
        The new colours in ``space``, in selection order.
    """
    _check_polar(space)
    if count < 0 or candidates < 1:
        raise ValueError(f"Need count >= 0 and candidates >= 1, got {count}, {candidates}")
    rng = np.random.default_rng(rng)

    taken = [ucs_coordinates(convert(c, space)) for c in occupied]
    reference = np.array(taken, dtype=np.float64).reshape(-1, 3)
    palette: List[Color] = []

    for k in range(count):
        pool = [random_color(space, rng, predicate) for _ in range(candidates)]
        pool_ucs = np.array([ucs_coordinates(c) for c in pool])
        if reference.shape[0] == 0:
            best = 0
        else:
            nearest = cdist(pool_ucs, reference).min(axis=1)
            best = int(np.argmax(nearest))
            logger.debug("Palette entry %d: min distance %.3f", k, nearest[best])
        palette.append(pool[best])
        reference = np.vstack([reference, pool_ucs[best]])
    return palette
