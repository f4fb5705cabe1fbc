# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Stimulus & Device Plumbing
==========================
Shared array plumbing plus the physical collaborators of the appearance
engine: the sRGB (IEC 61966-2-1) device encoding and xyY chromaticity
helpers.

Tristimulus convention:
    Stimuli are *relative* XYZ with Y = 1.0 for a perfect diffuse white.
    White points of viewing conditions are given on the Y = 100 scale,
    matching the published CIECAM02 worked examples.

Rework notes:
- The sRGB transfer functions are sign-mirrored (``sign(v) * f(|v|)``) so
  that scene-referred values outside [0, 1] survive a round trip.  Whether
  a colour is *displayable* is decided separately by ``srgb_in_range``.
- ``clip`` defaults to False: the gamut predicates need the raw result.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - CIE 15:2004 "Colorimetry"
"""

import functools
import numpy as np
from numba import njit
from typing import Final, TypeAlias, Callable, Any

from iris_errors import ComponentCountMismatch

__all__ = [
    # --- Type Aliases ---
    "ArrayFloat",

    # --- Constants ---
    "DEG2RAD",
    "RAD2DEG",
    "M_XYZ_TO_SRGB_T",
    "M_SRGB_TO_XYZ_T",

    # --- Decorators ---
    "handle_shapes",

    # --- Classes ---
    "StimulusEngine",

    # --- Functions ---
    "srgb_to_xyz",
    "xyz_to_srgb",
    "xyY_to_xyz",
    "srgb_in_range",
    "srgb_out_of_range",
]

# --- Type Aliases ---
# Internal kernels compile to float64; float32 inputs are copied on entry.
ArrayFloat: TypeAlias = np.typing.NDArray[np.floating]

# --- Constants & Pre-Transposed Matrices ---
DEG2RAD: Final[float] = np.pi / 180.0
RAD2DEG: Final[float] = 180.0 / np.pi

# sRGB Matrices (D65), defined by IEC 61966-2-1.
# Pre-transposed for row-vector products: rgb = xyz @ M_XYZ_TO_SRGB_T.
_M_XYZ_TO_SRGB_BASE = np.array([
    [ 3.2404542, -1.5371385, -0.4985314],
    [-0.9692660,  1.8760108,  0.0415560],
    [ 0.0556434, -0.2040259,  1.0572252]
], dtype=np.float64)
M_XYZ_TO_SRGB_T: Final[ArrayFloat] = _M_XYZ_TO_SRGB_BASE.T.copy()

_M_SRGB_TO_XYZ_BASE = np.array([
    [ 0.4124564,  0.3575761,  0.1804375],
    [ 0.2126729,  0.7151522,  0.0721750],
    [ 0.0193339,  0.1191920,  0.9503041]
], dtype=np.float64)
M_SRGB_TO_XYZ_T: Final[ArrayFloat] = _M_SRGB_TO_XYZ_BASE.T.copy()


# =============================================================================
# 1. ROBUST DECORATORS
# =============================================================================

def handle_shapes(func: Callable[..., ArrayFloat]) -> Callable[..., ArrayFloat]:
    """
    Decorator to normalize inputs to (N, 3) and safeguard shape.

    Single triples are treated as a batch of one internally, so every
    kernel only ever sees contiguous (N, 3) float64 data.

    Args:
        func: The function to decorate.

    Returns:
        The wrapped function with shape handling.
        - If input is (3,), returns (3,)
        - If input is (N, 3), returns (N, 3)

    Raises:
        ComponentCountMismatch: If the last axis does not hold 3 values.
    """
    @functools.wraps(func)
    def wrapper(arr: ArrayFloat, *args: Any, **kwargs: Any) -> ArrayFloat:
        arr = np.asarray(arr, dtype=np.float64)
        arr_in = np.ascontiguousarray(np.atleast_2d(arr))

        if arr_in.ndim != 2 or arr_in.shape[-1] != 3:
            raise ComponentCountMismatch(
                f"Expected shape (3,) or (N, 3), got {arr.shape}"
            )

        res = func(arr_in, *args, **kwargs)

        if arr.ndim == 1:
            return res[0]
        return res
    return wrapper


# =============================================================================
# 2. LOW-LEVEL TRANSFER KERNELS (Numba Optimized)
# =============================================================================

@njit(cache=True, fastmath=True)
def _signed_gamma_srgb(linear: ArrayFloat) -> ArrayFloat:
    """
    Applies the sRGB OETF, mirrored for negative input.

    Uses an explicit loop instead of ``np.where`` to avoid allocating a
    boolean mask array.
    """
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = linear_flat[i]
        a = abs(v)
        if a <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            r = 1.055 * (a ** (1.0/2.4)) - 0.055
            out_flat[i] = r if v > 0.0 else -r
    return out

@njit(cache=True, fastmath=True)
def _signed_inverse_gamma_srgb(srgb: ArrayFloat) -> ArrayFloat:
    """Applies the sRGB EOTF, mirrored for negative input."""
    out = np.empty_like(srgb)
    srgb_flat = srgb.ravel()
    out_flat = out.ravel()

    for i in range(srgb.size):
        v = srgb_flat[i]
        a = abs(v)
        if a <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            r = ((a + 0.055) / 1.055) ** 2.4
            out_flat[i] = r if v > 0.0 else -r
    return out


# =============================================================================
# 3. STIMULUS ENGINE
# =============================================================================

class StimulusEngine:
    """Static utility class for device and chromaticity conversions.

    Public methods are ``@handle_shapes`` decorated; the ``_raw`` variants
    assume validated (N, 3) float64 input and are used by the appearance
    pipelines to skip repeated shape checks.
    """

    @staticmethod
    def _srgb_to_xyz_raw(rgb_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        """Raw sRGB → XYZ.  *rgb_array* must be (N, 3) float64."""
        if clip:
            rgb_array = np.clip(rgb_array, 0.0, 1.0)
        linear = _signed_inverse_gamma_srgb(rgb_array)
        return np.dot(linear, M_SRGB_TO_XYZ_T)

    @staticmethod
    def _xyz_to_srgb_raw(xyz_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        """Raw XYZ → sRGB.  *xyz_array* must be (N, 3) float64."""
        linear = np.dot(xyz_array, M_XYZ_TO_SRGB_T)
        if clip:
            linear = np.clip(linear, 0.0, 1.0)
        return _signed_gamma_srgb(linear)

    @staticmethod
    def _xyY_to_xyz_raw(xyY_array: ArrayFloat) -> ArrayFloat:
        """Raw xyY → XYZ.  Zero ``y`` yields black."""
        x, y, Y = xyY_array[..., 0], xyY_array[..., 1], xyY_array[..., 2]
        xyz = np.zeros_like(xyY_array)
        mask = y > 1e-12
        if np.any(mask):
            factor = Y[mask] / y[mask]
            xyz[mask, 0] = x[mask] * factor
            xyz[mask, 1] = Y[mask]
            xyz[mask, 2] = (1.0 - x[mask] - y[mask]) * factor
        return xyz

    @staticmethod
    @handle_shapes
    def srgb_to_xyz(rgb_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        """
        Converts gamma-encoded sRGB to relative XYZ (Y = 1.0 for white).

        Args:
            rgb_array: sRGB values in [0, 1], shape (3,) or (N, 3).
            clip: If True, clamps the input to [0, 1] before decoding.

        Returns:
            XYZ tristimulus values with the same shape as the input.
        """
        return StimulusEngine._srgb_to_xyz_raw(rgb_array, clip)

    @staticmethod
    @handle_shapes
    def xyz_to_srgb(xyz_array: ArrayFloat, clip: bool = False) -> ArrayFloat:
        """
        Converts relative XYZ to gamma-encoded sRGB.

        Args:
            xyz_array: XYZ values (Y = 1.0 for white), shape (3,) or (N, 3).
            clip: If True, clamps linear RGB to [0, 1] before encoding.
                  Leave False to detect out-of-gamut colours.

        Returns:
            sRGB values with the same shape as the input.
        """
        return StimulusEngine._xyz_to_srgb_raw(xyz_array, clip)

    @staticmethod
    @handle_shapes
    def xyY_to_xyz(xyY_array: ArrayFloat) -> ArrayFloat:
        """Converts chromaticity + luminance (x, y, Y) to XYZ."""
        return StimulusEngine._xyY_to_xyz_raw(xyY_array)


# --- Module-level convenience aliases ---
srgb_to_xyz = StimulusEngine.srgb_to_xyz
xyz_to_srgb = StimulusEngine.xyz_to_srgb
xyY_to_xyz = StimulusEngine.xyY_to_xyz


# =============================================================================
# 4. RANGE CHECKS
# =============================================================================

def srgb_in_range(rgb: ArrayFloat, lower_tolerance: float = 0.0,
                  upper_tolerance: float = 0.0) -> Any:
    """
    Tests whether sRGB triples lie inside the unit cube.

    Args:
        rgb: sRGB values, shape (3,) or (N, 3).
        lower_tolerance: Amount a channel may fall below 0.
        upper_tolerance: Amount a channel may exceed 1.

    Returns:
        ``bool`` for a single triple, boolean array of shape (N,) otherwise.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    if arr.shape[-1] != 3:
        raise ComponentCountMismatch(f"Expected last dimension size 3, got {arr.shape[-1]}")
    inside = np.all((arr >= -lower_tolerance) & (arr <= 1.0 + upper_tolerance), axis=-1)
    if arr.ndim == 1:
        return bool(inside)
    return inside

def srgb_out_of_range(rgb: ArrayFloat, lower_tolerance: float = 0.0,
                      upper_tolerance: float = 0.0) -> Any:
    """Negation of :func:`srgb_in_range`."""
    inside = srgb_in_range(rgb, lower_tolerance, upper_tolerance)
    if isinstance(inside, bool):
        return not inside
    return ~inside
