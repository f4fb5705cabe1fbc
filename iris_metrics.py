# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Appearance Metrics
==================
Distances between appearance colours.

- ``distance_ucs``: Euclidean distance in CAM02-UCS (J', a', b'); the
  recommended general-purpose perceptual delta.
- ``distance_cartesian``: weighted Euclidean distance in a Cartesian
  appearance space.
- ``distance_polar``: weighted distance on (lightness, chroma, hue) with
  each term scaled by the nominal range of its correlate.
- ``perceptual_distance``: UCS distance for colours from any space.

Array workloads use ``AppearanceMetrics``, whose kernels broadcast 1-vs-N
and run on Numba ``prange``.

Weights are normalised so the largest equals 1.  At least one weight must
be positive.

References:
    - Luo, M. R., Cui, G., Li, C. (2006). "Uniform colour spaces based on
      CIECAM02 colour appearance model". Color Res. Appl. 31(4).
"""

import numpy as np
from numba import njit, prange
from typing import Final, Optional, Tuple

from iris_cam import Correlate, get_transform
from iris_colors import AppearanceSpace, Color, ColorSpace, convert
from iris_correlates import JMh, hue_difference, hue_distance, reconfigure_values
from iris_errors import ComponentCountMismatch, MismatchedConfiguration, UnsupportedTargetError
from iris_stimulus import ArrayFloat, DEG2RAD, RAD2DEG, handle_shapes
from iris_viewing import ViewingConditions, get_standard_conditions

__all__ = [
    # --- Constants ---
    "UCS_C1",
    "UCS_C2",
    "NOMINAL_CHROMA",

    # --- Functions ---
    "hue_difference",
    "hue_distance",
    "correlate_range",
    "distance_polar",
    "distance_cartesian",
    "distance_ucs",
    "perceptual_distance",
    "ucs_coordinates",

    # --- Classes ---
    "AppearanceMetrics",
]

# CAM02-UCS coefficients (Luo et al. 2006)
UCS_C1: Final[float] = 0.007
UCS_C2: Final[float] = 0.0228

# Nominal upper end of the chroma scale; colorfulness scales it by F_L^0.25.
NOMINAL_CHROMA: Final[float] = 120.0


# =============================================================================
# 1. KERNELS
# =============================================================================

@njit(cache=True, fastmath=True)
def _jmh_to_ucs_kernel(jmh: ArrayFloat) -> ArrayFloat:
    """(J, M, h) → (J', a', b').  Input shape (N, 3), Output shape (N, 3)."""
    n = jmh.shape[0]
    out = np.empty_like(jmh)
    for i in range(n):
        J, M, h = jmh[i, 0], jmh[i, 1], jmh[i, 2]
        m_p = np.log(1.0 + UCS_C2 * M) / UCS_C2
        h_rad = h * DEG2RAD
        out[i, 0] = (1.0 + 100.0 * UCS_C1) * J / (1.0 + UCS_C1 * J)
        out[i, 1] = m_p * np.cos(h_rad)
        out[i, 2] = m_p * np.sin(h_rad)
    return out

@njit(cache=True, fastmath=True)
def _ucs_to_jmh_kernel(jab: ArrayFloat) -> ArrayFloat:
    """(J', a', b') → (J, M, h) with h in [0, 360)."""
    n = jab.shape[0]
    out = np.empty_like(jab)
    for i in range(n):
        J_p, a_p, b_p = jab[i, 0], jab[i, 1], jab[i, 2]
        h = np.arctan2(b_p, a_p) * RAD2DEG
        if h < 0: h += 360.0
        if h >= 360.0: h -= 360.0
        out[i, 0] = J_p / (1.0 + 100.0 * UCS_C1 - UCS_C1 * J_p)
        out[i, 1] = (np.exp(UCS_C2 * np.hypot(a_p, b_p)) - 1.0) / UCS_C2
        out[i, 2] = h
    return out

@njit(cache=True, fastmath=True, parallel=True)
def _batch_delta_e_euclidean(x1: ArrayFloat, x2: ArrayFloat, w_l: float, w_c: float) -> ArrayFloat:
    """Weighted Euclidean distance on (L, a, b) rows."""
    n = len(x1)
    res = np.empty(n, dtype=np.float64)
    for i in prange(n):
        dL = (x1[i, 0] - x2[i, 0]) * w_l
        da = (x1[i, 1] - x2[i, 1]) * w_c
        db = (x1[i, 2] - x2[i, 2]) * w_c
        res[i] = np.sqrt(dL*dL + da*da + db*db)
    return res

@njit(cache=True, fastmath=True, parallel=True)
def _batch_delta_e_ucs(jmh1: ArrayFloat, jmh2: ArrayFloat, w_l: float, w_c: float) -> ArrayFloat:
    """CAM02-UCS distance between (J, M, h) rows."""
    n = len(jmh1)
    res = np.empty(n, dtype=np.float64)
    k_l = 1.0 + 100.0 * UCS_C1
    for i in prange(n):
        J1, M1, h1 = jmh1[i, 0], jmh1[i, 1], jmh1[i, 2]
        J2, M2, h2 = jmh2[i, 0], jmh2[i, 1], jmh2[i, 2]
        m1 = np.log(1.0 + UCS_C2 * M1) / UCS_C2
        m2 = np.log(1.0 + UCS_C2 * M2) / UCS_C2
        dJ = (k_l * J1 / (1.0 + UCS_C1 * J1) - k_l * J2 / (1.0 + UCS_C1 * J2)) * w_l
        da = (m1 * np.cos(h1 * DEG2RAD) - m2 * np.cos(h2 * DEG2RAD)) * w_c
        db = (m1 * np.sin(h1 * DEG2RAD) - m2 * np.sin(h2 * DEG2RAD)) * w_c
        res[i] = np.sqrt(dJ*dJ + da*da + db*db)
    return res


def _normalise_weights(*weights: float) -> Tuple[float, ...]:
    top = max(weights)
    if not top > 0.0:
        raise ValueError(f"At least one weight must be positive, got {weights}")
    return tuple(w / top for w in weights)


# =============================================================================
# 2. ARRAY API
# =============================================================================

class AppearanceMetrics:
    """Batch distances on raw correlate arrays."""

    @staticmethod
    def _prepare_inputs(x1: ArrayFloat, x2: ArrayFloat) -> Tuple[ArrayFloat, ArrayFloat]:
        """
        Broadcasting helper.

        Materialises ``broadcast_to`` views into contiguous arrays so the
        ``prange`` kernels see dense C-contiguous memory.
        """
        a1 = np.ascontiguousarray(np.atleast_2d(np.asarray(x1, dtype=np.float64)))
        a2 = np.ascontiguousarray(np.atleast_2d(np.asarray(x2, dtype=np.float64)))

        if a1.shape[-1] != 3 or a2.shape[-1] != 3:
            raise ComponentCountMismatch(f"Inputs must have shape (N, 3), got {a1.shape} and {a2.shape}")

        if a1.shape[0] != a2.shape[0]:
            if a1.shape[0] == 1: a1 = np.ascontiguousarray(np.broadcast_to(a1, a2.shape))
            elif a2.shape[0] == 1: a2 = np.ascontiguousarray(np.broadcast_to(a2, a1.shape))
            else: raise ValueError(f"Shapes {a1.shape} and {a2.shape} are not broadcastable.")
        return a1, a2

    @staticmethod
    @handle_shapes
    def jmh_to_ucs(jmh: ArrayFloat) -> ArrayFloat:
        """Lightness, colorfulness, hue angle → CAM02-UCS (J', a', b')."""
        return _jmh_to_ucs_kernel(jmh)

    @staticmethod
    @handle_shapes
    def ucs_to_jmh(jab: ArrayFloat) -> ArrayFloat:
        """CAM02-UCS (J', a', b') → lightness, colorfulness, hue angle."""
        return _ucs_to_jmh_kernel(jab)

    @staticmethod
    def delta_E_ucs(jmh1: ArrayFloat, jmh2: ArrayFloat,
                    lightness_weight: float = 1.0, colorfulness_weight: float = 1.0) -> ArrayFloat:
        """
        CAM02-UCS colour difference.

        Args:
            jmh1: Reference (J, M, h), shape (N, 3) or (3,).
            jmh2: Sample (J, M, h), shape (N, 3) or (3,).
            lightness_weight: Relative weight of the J' term.
            colorfulness_weight: Relative weight of the a', b' terms.

        Returns:
            Distances; a float when both inputs are single triples.
        """
        w_l, w_c = _normalise_weights(lightness_weight, colorfulness_weight)
        x1, x2 = AppearanceMetrics._prepare_inputs(jmh1, jmh2)
        res = _batch_delta_e_ucs(x1, x2, w_l, w_c)
        if np.ndim(jmh1) == 1 and np.ndim(jmh2) == 1: return float(res[0])
        return res

    @staticmethod
    def delta_E_euclidean(lab1: ArrayFloat, lab2: ArrayFloat,
                          lightness_weight: float = 1.0, colorfulness_weight: float = 1.0) -> ArrayFloat:
        """Weighted Euclidean difference of Cartesian (L, a, b) triples."""
        w_l, w_c = _normalise_weights(lightness_weight, colorfulness_weight)
        x1, x2 = AppearanceMetrics._prepare_inputs(lab1, lab2)
        res = _batch_delta_e_euclidean(x1, x2, w_l, w_c)
        if np.ndim(lab1) == 1 and np.ndim(lab2) == 1: return float(res[0])
        return res


# =============================================================================
# 3. COLOUR-LEVEL DISTANCES
# =============================================================================

def correlate_range(correlate: Correlate, conditions: ViewingConditions) -> float:
    """
    Nominal upper end of a correlate's scale under ``conditions``.

    J and s span 100, C spans 120, Q and M scale with the conditions, hue
    spans its full circle.
    """
    if correlate is Correlate.J or correlate is Correlate.s:
        return 100.0
    if correlate is Correlate.C:
        return NOMINAL_CHROMA
    if correlate is Correlate.M:
        return NOMINAL_CHROMA * conditions.fl4
    if correlate is Correlate.Q:
        return get_transform(conditions).brightness_from_lightness(100.0)
    if correlate is Correlate.h:
        return 360.0
    return 400.0

def _same_appearance_space(a: Color, b: Color) -> AppearanceSpace:
    if a.space != b.space:
        raise MismatchedConfiguration(
            f"Cannot measure between {a.space.name} and {b.space.name}; convert first"
        )
    if not isinstance(a.space, AppearanceSpace):
        raise UnsupportedTargetError(f"Appearance distance needs appearance colours, got {a.space.name}")
    return a.space

def distance_polar(a: Color, b: Color, lightness_weight: float = 1.0,
                   colorfulness_weight: float = 1.0, hue_weight: float = 1.0) -> float:
    """
    Range-normalised distance on (lightness, chroma, hue).

    Each difference is divided by the nominal range of its correlate, the
    hue term uses the shortest arc.

    Raises:
        MismatchedConfiguration: If the colours live in different spaces.
        UnsupportedTargetError: If the space is not a polar appearance space.
    """
    space = _same_appearance_space(a, b)
    if space.cartesian:
        raise UnsupportedTargetError("distance_polar needs polar colours; use distance_cartesian")
    w_l, w_c, w_h = _normalise_weights(lightness_weight, colorfulness_weight, hue_weight)
    cfg, vc = space.configuration, space.conditions
    w_l /= correlate_range(cfg.lightness, vc)
    w_c /= correlate_range(cfg.chroma, vc)
    w_h /= correlate_range(cfg.hue, vc)

    dL = (a[0] - b[0]) * w_l
    dc = (a[1] - b[1]) * w_c
    dh = hue_distance(a[2], b[2], cfg.hue_modulus) * w_h
    return float(np.sqrt(dL*dL + dc*dc + dh*dh))

def distance_cartesian(a: Color, b: Color, lightness_weight: float = 1.0,
                       colorfulness_weight: float = 1.0) -> float:
    """
    Weighted Euclidean distance in a Cartesian appearance space.

    Raises:
        MismatchedConfiguration: If the colours live in different spaces.
        UnsupportedTargetError: If the space is not Cartesian.
    """
    space = _same_appearance_space(a, b)
    if not space.cartesian:
        raise UnsupportedTargetError("distance_cartesian needs Cartesian colours")
    return AppearanceMetrics.delta_E_euclidean(a.as_array(), b.as_array(),
                                               lightness_weight, colorfulness_weight)

def _jmh_values(color: Color) -> ArrayFloat:
    space = color.space
    polar = convert(color, space.polar_form()) if space.cartesian else color
    return reconfigure_values(polar.as_array(), space.configuration, JMh, space.conditions)

def distance_ucs(a: Color, b: Color, lightness_weight: float = 1.0,
                 colorfulness_weight: float = 1.0) -> float:
    """
    CAM02-UCS distance between two appearance colours of the same space.

    Raises:
        MismatchedConfiguration: If the colours live in different spaces.
        UnsupportedTargetError: If they are not appearance colours.
        IncompleteConfigurationError: If J, M or h cannot be derived.
    """
    _same_appearance_space(a, b)
    return AppearanceMetrics.delta_E_ucs(_jmh_values(a), _jmh_values(b),
                                         lightness_weight, colorfulness_weight)

def perceptual_distance(a: Color, b: Color, space: Optional[ColorSpace] = None) -> float:
    """
    UCS distance between colours from any space.

    Appearance colours sharing a space are measured directly; otherwise
    both are converted into ``space`` (default: JMh under the standard
    "default" viewing conditions) first.
    """
    if space is None and a.space == b.space and isinstance(a.space, AppearanceSpace):
        return distance_ucs(a, b)
    if space is None:
        space = AppearanceSpace(get_standard_conditions("default"), JMh)
    if not isinstance(space, AppearanceSpace):
        raise UnsupportedTargetError(f"Perceptual distance needs an appearance space, got {space.name}")
    return distance_ucs(convert(a, space), convert(b, space))

def ucs_coordinates(color: Color) -> ArrayFloat:
    """CAM02-UCS (J', a', b') of an appearance colour."""
    if not isinstance(color.space, AppearanceSpace):
        raise UnsupportedTargetError(f"UCS coordinates need an appearance colour, got {color.space.name}")
    return AppearanceMetrics.jmh_to_ucs(_jmh_values(color))
