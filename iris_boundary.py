# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Gamut Boundary Search
=====================
Binary search for the edge of a region of colour space defined by an
inclusion predicate, e.g. "maps into sRGB without clipping".

The search varies one channel of a colour between a lower bound known to
be inside and an upper bound that may be outside.  It stops once the
midpoint probe is perceptually indistinguishable (CAM02-UCS distance
below ``epsilon``) from the best colour known to be inside, so the
tolerance is expressed in appearance units rather than channel units.
"""

import logging
import numpy as np
from typing import Callable, Dict, Iterable, List

from iris_colors import SRGB, AppearanceSpace, Color, convert
from iris_errors import UnsupportedTargetError
from iris_metrics import perceptual_distance
from iris_stimulus import srgb_in_range

__all__ = [
    "Predicate",
    "is_srgb",
    "find_boundary",
    "gamut_rings",
]

logger = logging.getLogger(__name__)

Predicate = Callable[[Color], bool]

# Absorbs round-off at the cube faces, e.g. reference white → (1 + 5e-7).
SRGB_TOLERANCE: float = 1e-5


def is_srgb(color: Color, tolerance: float = SRGB_TOLERANCE) -> bool:
    """True if ``color`` is displayable in sRGB without clipping."""
    rgb = convert(color, SRGB).as_array()
    return bool(srgb_in_range(rgb, tolerance, tolerance))


def _probe(color: Color, channel: int, value: float) -> Color:
    values = list(color.values)
    values[channel] = value
    return color.with_values(values)

def _bisect(color: Color, channel: int, lower: float, upper: float, best: Color,
            epsilon: float, predicate: Predicate, depth: int) -> Color:
    mid_value = 0.5 * (lower + upper)
    mid = _probe(color, channel, mid_value)
    if perceptual_distance(best, mid) < epsilon:
        return best
    if depth <= 0:
        logger.warning("Boundary search on channel %d stopped at depth limit; bracket [%g, %g]",
                       channel, lower, upper)
        return best
    if predicate(mid):
        return _bisect(color, channel, mid_value, upper, mid, epsilon, predicate, depth - 1)
    return _bisect(color, channel, lower, mid_value, best, epsilon, predicate, depth - 1)

def find_boundary(color: Color, channel: int, lower: float, upper: float,
                  epsilon: float, predicate: Predicate = is_srgb,
                  max_depth: int = 64) -> Color:
    """
    Finds the last colour along one channel that satisfies ``predicate``.

    Args:
        color: Template colour; all channels except ``channel`` are kept.
        channel: Index of the component to vary.
        lower: Channel value known to satisfy the predicate.
        upper: Channel value bounding the search (may be outside).
        epsilon: Perceptual (CAM02-UCS) tolerance of the result.
        predicate: Inclusion test.
        max_depth: Recursion bound; a warning is logged if it is reached.

    Returns:
        A colour satisfying ``predicate`` whose next probe towards the
        boundary is within ``epsilon`` of it.

    Raises:
        ValueError: If the predicate fails at ``lower`` or ``epsilon <= 0``.
    """
    if not 0 <= channel < 3:
        raise ValueError(f"Channel must be 0, 1 or 2, got {channel}")
    if not epsilon > 0.0:
        raise ValueError(f"epsilon must be > 0, got {epsilon}")
    start = _probe(color, channel, lower)
    if not predicate(start):
        raise ValueError(f"Predicate is not satisfied at the lower bound {lower}")
    return _bisect(color, channel, lower, upper, start, epsilon, predicate, max_depth)

def gamut_rings(space: AppearanceSpace, lightness_levels: Iterable[float],
                hues: Iterable[float], upper: float = 150.0, epsilon: float = 0.01,
                predicate: Predicate = is_srgb) -> Dict[float, List[Color]]:
    """
    Maximum-chroma boundary colours per lightness level and hue.

    Args:
        space: Polar appearance space; the chroma channel is searched.
        lightness_levels: Values of the lightness correlate.
        hues: Hue values in the space's hue unit.
        upper: Upper bound of the chroma search.
        epsilon: Perceptual tolerance, see :func:`find_boundary`.
        predicate: Inclusion test, sRGB by default.

    Returns:
        ``{lightness: [boundary colour per hue]}``.
    """
    if not isinstance(space, AppearanceSpace) or space.cartesian:
        raise UnsupportedTargetError("gamut_rings needs a polar appearance space")
    hue_list = [float(h) for h in hues]
    rings: Dict[float, List[Color]] = {}
    for level in lightness_levels:
        level = float(level)
        ring = []
        for hue in hue_list:
            start = Color((level, 0.0, hue), space)
            ring.append(find_boundary(start, 1, 0.0, upper, epsilon, predicate))
        rings[level] = ring
        logger.debug("Gamut ring at %s=%g: max chroma %.3f", space.configuration.lightness.name,
                     level, float(np.max([c[1] for c in ring])) if ring else 0.0)
    return rings
