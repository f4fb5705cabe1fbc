# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

CIECAM02 Transform Engine
=========================
JIT-compiled forward (stimulus → 7 correlates) and reverse (J, C, h →
stimulus) CIECAM02 chain, plus the scalar relations between correlates
used to complete a partially known appearance.

Pipeline (forward):
    XYZ·100 → CAT02 → von Kries gains D_RGB → HPE → response compression
    → A, J, Q, (a, b), h, H, e, t, C, M, s

The three linear stages are folded into one 3x3 matrix per viewing
condition (``CIECAM02Transform.forward_matrix_t``); its inverse is derived
numerically with ``np.linalg.inv`` so that reverse(forward(x)) is exact up
to floating-point rounding.

Rework notes:
- Kernels are compiled with ``fastmath=False``.  Response compression and
  the hue-quadrant guard depend on exact signed zero and NaN handling.
- A non-positive achromatic response maps to J = 0 instead of NaN.
- Saturation is defined as 0 when both M and Q vanish (black).
- Reverse chroma is sign-preserving: t = sign(C)·|C / temp|^(1/0.9).

References:
    - CIE 159:2004 "A colour appearance model for colour management
      systems: CIECAM02"
    - Fairchild, M. D. (2013). "Color Appearance Models", 3rd ed.
"""

import enum
import functools
import logging
import numpy as np
from numba import njit
from typing import Final, Optional, Iterable, Iterator, Tuple, TYPE_CHECKING

from iris_errors import IncompleteConfigurationError
from iris_stimulus import ArrayFloat, DEG2RAD, RAD2DEG, handle_shapes

if TYPE_CHECKING:
    from iris_viewing import ViewingConditions

__all__ = [
    # --- Constants ---
    "M_CAT02_T",
    "M_CAT02_INV_T",
    "M_CAT02_TO_HPE_T",
    "HUE_ANCHORS",
    "HUE_ECCENTRICITIES",

    # --- Types ---
    "Correlate",
    "AppearanceVector",

    # --- Classes ---
    "CIECAM02Transform",

    # --- Functions ---
    "hue_quadrature",
    "hue_angle_from_quadrature",
    "get_transform",
    "forward",
    "reverse",
    "reverse_jch",
]

logger = logging.getLogger(__name__)

# --- Matrices ---
# CAT02 sharpened cone space.
_M_CAT02 = np.array([
    [ 0.7328,  0.4296, -0.1624],
    [-0.7036,  1.6975,  0.0061],
    [ 0.0030,  0.0136,  0.9834]
], dtype=np.float64)
M_CAT02_T: Final[ArrayFloat] = _M_CAT02.T.copy()
M_CAT02_INV_T: Final[ArrayFloat] = np.linalg.inv(_M_CAT02).T.copy()

# Hunt-Pointer-Estevez cone fundamentals (equal-energy normalised).
_M_HPE = np.array([
    [ 0.38971,  0.68898, -0.07868],
    [-0.22981,  1.18340,  0.04641],
    [ 0.00000,  0.00000,  1.00000]
], dtype=np.float64)

# CAT02 → HPE in one step: M_HPE · M_CAT02⁻¹
M_CAT02_TO_HPE_T: Final[ArrayFloat] = (_M_HPE @ np.linalg.inv(_M_CAT02)).T.copy()

# --- Hue quadrature table (red, yellow, green, blue, red) ---
HUE_ANCHORS: Final[ArrayFloat] = np.array([20.14, 90.0, 164.25, 237.53, 380.14], dtype=np.float64)
HUE_ECCENTRICITIES: Final[ArrayFloat] = np.array([0.8, 0.7, 1.0, 1.2, 0.8], dtype=np.float64)


# =============================================================================
# 1. SCALAR KERNELS
# =============================================================================

@njit(cache=True)
def _compress(v: float, f_l: float) -> float:
    """
    Post-adaptation response compression of one HPE channel.

    ``sign(v)·400·n/(n + 27.13) + 0.1`` with ``n = (F_L·|v|/100)^0.42``.
    The +0.1 offset is added on both branches.
    """
    n = (f_l * abs(v) / 100.0) ** 0.42
    r = 400.0 * n / (n + 27.13)
    if v < 0.0:
        return 0.1 - r
    return r + 0.1

@njit(cache=True)
def _decompress(v: float, f_l: float) -> float:
    """Inverse of :func:`_compress`; an exact 0.1 decodes to 0."""
    d = v - 0.1
    if d == 0.0:
        return 0.0
    k = abs(d)
    r = (100.0 / f_l) * ((27.13 * k) / (400.0 - k)) ** (1.0 / 0.42)
    if d < 0.0:
        return -r
    return r

@njit(cache=True)
def _hue_angle(a: float, b: float) -> float:
    """atan2(b, a) in degrees, normalised to [0, 360)."""
    h = np.arctan2(b, a) * RAD2DEG
    if h < 0.0:
        h += 360.0
    if h >= 360.0:
        h -= 360.0
    return h

@njit(cache=True)
def _hue_quadrature(h: float) -> float:
    """Hue angle (degrees) → hue composition H in [0, 400)."""
    hp = h % 360.0
    if hp < HUE_ANCHORS[0]:
        hp += 360.0
    i = 0
    while i < 3 and hp >= HUE_ANCHORS[i + 1]:
        i += 1
    x = (hp - HUE_ANCHORS[i]) / HUE_ECCENTRICITIES[i]
    y = (HUE_ANCHORS[i + 1] - hp) / HUE_ECCENTRICITIES[i + 1]
    return 100.0 * i + 100.0 * x / (x + y)

@njit(cache=True)
def _hue_from_quadrature(H: float) -> float:
    """Hue composition H → hue angle in [0, 360)."""
    Hn = H % 400.0
    i = int(Hn // 100.0)
    if i > 3:
        i = 3
    p = Hn - 100.0 * i
    h_i = HUE_ANCHORS[i]
    h_j = HUE_ANCHORS[i + 1]
    e_i = HUE_ECCENTRICITIES[i]
    e_j = HUE_ECCENTRICITIES[i + 1]
    h = (p * (e_j * h_i - e_i * h_j) - 100.0 * h_i * e_j) / (p * (e_j - e_i) - 100.0 * e_j)
    if h >= 360.0:
        h -= 360.0
    return h

@njit(cache=True)
def _eccentricity(h: float, e_scale: float) -> float:
    """Eccentricity factor e(h) with ``e_scale = (12500/13)·N_c·N_cb``."""
    return e_scale * (np.cos(h * DEG2RAD + 2.0) + 3.8)

@njit(cache=True)
def _opponent_from_hue(h: float, e: float, t: float, p2: float) -> Tuple[float, float]:
    """
    Recovers the opponent pair (a, b) from hue, eccentricity and t.

    The pivot is whichever of sin(h) / cos(h) has the larger magnitude so
    the solve never divides by a near-zero trigonometric value.
    """
    if t == 0.0:
        return 0.0, 0.0
    p3 = 1.05
    h_rad = h * DEG2RAD
    sin_h = np.sin(h_rad)
    cos_h = np.cos(h_rad)
    p1 = e / t
    num = p2 * (2.0 + p3) * (460.0 / 1403.0)
    if abs(sin_h) >= abs(cos_h):
        cot = cos_h / sin_h
        p4 = p1 / sin_h
        b = num / (p4 + (2.0 + p3) * (220.0 / 1403.0) * cot
                   - (27.0 / 1403.0) + p3 * (6300.0 / 1403.0))
        a = b * cot
    else:
        tan = sin_h / cos_h
        p5 = p1 / cos_h
        a = num / (p5 + (2.0 + p3) * (220.0 / 1403.0)
                   - ((27.0 / 1403.0) - p3 * (6300.0 / 1403.0)) * tan)
        b = a * tan
    return a, b


# =============================================================================
# 2. BATCH KERNELS
# =============================================================================

@njit(cache=True)
def _forward_kernel(rgb_p: ArrayFloat, f_l: float, fl4: float, n_bb: float,
                    a_w: float, cz: float, c: float, e_scale: float,
                    chroma_scale: float) -> ArrayFloat:
    """
    HPE cone responses (N, 3) → correlates (N, 7) ordered J, Q, C, M, s, H, h.
    """
    n = rgb_p.shape[0]
    out = np.empty((n, 7), dtype=np.float64)
    q_scale = (4.0 / c) * (a_w + 4.0) * fl4

    for i in range(n):
        r = _compress(rgb_p[i, 0], f_l)
        g = _compress(rgb_p[i, 1], f_l)
        bl = _compress(rgb_p[i, 2], f_l)

        A = (2.0 * r + g + bl / 20.0 - 0.305) * n_bb
        if A > 0.0:
            J = 100.0 * (A / a_w) ** cz
        else:
            J = 0.0
        root_j = np.sqrt(J / 100.0)
        Q = q_scale * root_j

        ca = r + (-12.0 * g + bl) / 11.0
        cb = (r + g - 2.0 * bl) / 9.0
        h = _hue_angle(ca, cb)
        H = _hue_quadrature(h)

        e = _eccentricity(h, e_scale)
        t = e * np.hypot(ca, cb) / (r + g + 1.05 * bl)
        tc = abs(t) ** 0.9
        if t < 0.0:
            tc = -tc
        C = tc * root_j * chroma_scale
        M = C * fl4
        if Q > 0.0:
            s = 100.0 * np.sqrt(M / Q)
        else:
            s = 0.0

        out[i, 0] = J
        out[i, 1] = Q
        out[i, 2] = C
        out[i, 3] = M
        out[i, 4] = s
        out[i, 5] = H
        out[i, 6] = h
    return out

@njit(cache=True)
def _reverse_kernel(jch: ArrayFloat, f_l: float, n_bb: float, a_w: float,
                    inv_cz: float, e_scale: float, chroma_scale: float) -> ArrayFloat:
    """
    Correlates (N, 3) ordered J, C, h → HPE cone responses (N, 3).

    Negative lightness has no stimulus and yields NaN.
    """
    n = jch.shape[0]
    out = np.empty((n, 3), dtype=np.float64)

    for i in range(n):
        J, C, h = jch[i, 0], jch[i, 1], jch[i, 2]
        if J < 0.0:
            out[i, 0] = np.nan
            out[i, 1] = np.nan
            out[i, 2] = np.nan
            continue

        A = a_w * (J / 100.0) ** inv_cz
        temp = np.sqrt(J / 100.0) * chroma_scale
        if temp == 0.0:
            t = 0.0
        else:
            t = (abs(C) / temp) ** (1.0 / 0.9)
            if C < 0.0:
                t = -t

        p2 = A / n_bb + 0.305
        e = _eccentricity(h, e_scale)
        a, b = _opponent_from_hue(h, e, t, p2)

        k = 460.0 / 1403.0 * p2
        out[i, 0] = _decompress(k + 451.0 / 1403.0 * a + 288.0 / 1403.0 * b, f_l)
        out[i, 1] = _decompress(k - 891.0 / 1403.0 * a - 261.0 / 1403.0 * b, f_l)
        out[i, 2] = _decompress(k - 220.0 / 1403.0 * a - 6300.0 / 1403.0 * b, f_l)
    return out

@njit(cache=True)
def _lightness_kernel(rgb_p: ArrayFloat, f_l: float, n_bb: float, a_w: float,
                      cz: float) -> ArrayFloat:
    """HPE cone responses (N, 3) → lightness J (N,)."""
    n = rgb_p.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        r = _compress(rgb_p[i, 0], f_l)
        g = _compress(rgb_p[i, 1], f_l)
        bl = _compress(rgb_p[i, 2], f_l)
        A = (2.0 * r + g + bl / 20.0 - 0.305) * n_bb
        out[i] = 100.0 * (A / a_w) ** cz if A > 0.0 else 0.0
    return out


def hue_quadrature(h: float) -> float:
    """Hue angle in degrees → hue composition H in [0, 400)."""
    return float(_hue_quadrature(float(h)))

def hue_angle_from_quadrature(H: float) -> float:
    """Hue composition H → hue angle in degrees, [0, 360)."""
    return float(_hue_from_quadrature(float(H)))


# =============================================================================
# 3. CORRELATE VECTOR
# =============================================================================

class Correlate(enum.IntEnum):
    """Canonical slot order of the seven CIECAM02 correlates."""
    J = 0   # lightness
    Q = 1   # brightness
    C = 2   # chroma
    M = 3   # colorfulness
    s = 4   # saturation
    H = 5   # hue composition
    h = 6   # hue angle

    @classmethod
    def from_name(cls, name: str) -> "Correlate":
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown correlate '{name}'. Expected one of "
                             f"{[c.name for c in cls]}") from None


class AppearanceVector:
    """
    Seven correlate slots, each either a float or unset (``None``).

    Used as the scratch state while a partial appearance is completed.
    Unset is tracked explicitly; NaN is never used as a marker, so a NaN
    produced by arithmetic cannot masquerade as "not yet computed".
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Iterable[Optional[float]]] = None) -> None:
        if values is None:
            self._values: list[Optional[float]] = [None] * 7
        else:
            vals = [None if v is None else float(v) for v in values]
            if len(vals) != 7:
                raise ValueError(f"AppearanceVector needs 7 slots, got {len(vals)}")
            self._values = vals

    @classmethod
    def from_correlates(cls, **correlates: float) -> "AppearanceVector":
        """Builds a vector from keyword correlates, e.g. ``J=50, C=20, h=90``."""
        vec = cls()
        for name, value in correlates.items():
            vec[Correlate.from_name(name)] = value
        return vec

    @classmethod
    def from_array(cls, arr: ArrayFloat) -> "AppearanceVector":
        """Wraps a full forward result row of length 7."""
        return cls(np.asarray(arr, dtype=np.float64).tolist())

    def __getitem__(self, key: Correlate) -> Optional[float]:
        return self._values[int(key)]

    def __setitem__(self, key: Correlate, value: Optional[float]) -> None:
        self._values[int(key)] = None if value is None else float(value)

    def __iter__(self) -> Iterator[Optional[float]]:
        return iter(self._values)

    def __repr__(self) -> str:
        parts = ", ".join(f"{c.name}={self._values[c]!r}" for c in Correlate)
        return f"AppearanceVector({parts})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppearanceVector):
            return NotImplemented
        return self._values == other._values

    def copy(self) -> "AppearanceVector":
        return AppearanceVector(self._values)

    def is_set(self, key: Correlate) -> bool:
        return self._values[int(key)] is not None

    def missing(self, keys: Iterable[Correlate] = tuple(Correlate)) -> Tuple[Correlate, ...]:
        """Returns the subset of ``keys`` that are still unset."""
        return tuple(k for k in keys if self._values[int(k)] is None)

    @property
    def is_complete(self) -> bool:
        return all(v is not None for v in self._values)

    def select(self, keys: Iterable[Correlate]) -> ArrayFloat:
        """Returns the requested slots as an array; unset slots raise."""
        keys = tuple(keys)
        gaps = self.missing(keys)
        if gaps:
            raise ValueError(f"Correlates {[k.name for k in gaps]} are unset")
        return np.array([self._values[int(k)] for k in keys], dtype=np.float64)

    def to_array(self) -> ArrayFloat:
        """All seven slots as float64; unset slots become NaN."""
        return np.array([np.nan if v is None else v for v in self._values], dtype=np.float64)


def _finite(*values: float) -> bool:
    return all(np.isfinite(v) for v in values)


# =============================================================================
# 4. TRANSFORM
# =============================================================================

class CIECAM02Transform:
    """
    CIECAM02 engine bound to one set of viewing conditions.

    Instances are immutable after construction; use :func:`get_transform`
    to share them per ``ViewingConditions``.

    Args:
        conditions: The viewing environment.
    """

    __slots__ = ("conditions", "forward_matrix_t", "reverse_matrix_t",
                 "_f_l", "_fl4", "_n_bb", "_a_w", "_c", "_cz", "_inv_cz",
                 "_e_scale", "_chroma_scale")

    def __init__(self, conditions: "ViewingConditions") -> None:
        self.conditions = conditions
        d_rgb = np.asarray(conditions.d_rgb, dtype=np.float64)

        # Row-vector convention: rgb_p = xyz @ (M_CAT02ᵀ · diag(D) · M_C2Hᵀ)
        self.forward_matrix_t = (M_CAT02_T * d_rgb[np.newaxis, :]) @ M_CAT02_TO_HPE_T
        self.reverse_matrix_t = np.linalg.inv(self.forward_matrix_t)

        self._f_l = conditions.f_l
        self._fl4 = conditions.f_l ** 0.25
        self._n_bb = conditions.n_bb
        self._a_w = conditions.a_w
        self._c = conditions.surround.c
        self._cz = conditions.surround.c * conditions.z
        self._inv_cz = 1.0 / self._cz
        self._e_scale = (12500.0 / 13.0) * conditions.surround.n_c * conditions.n_cb
        self._chroma_scale = (1.64 - 0.29 ** conditions.n) ** 0.73

    def __repr__(self) -> str:
        return f"CIECAM02Transform({self.conditions!r})"

    # =====================================================================
    #  Internal _raw fast-path methods  (assume validated (N, 3) float64)
    # =====================================================================

    def _to_cone_raw(self, xyz: ArrayFloat) -> ArrayFloat:
        return np.ascontiguousarray(np.dot(xyz * 100.0, self.forward_matrix_t))

    def _forward_raw(self, xyz: ArrayFloat) -> ArrayFloat:
        return _forward_kernel(self._to_cone_raw(xyz), self._f_l, self._fl4,
                               self._n_bb, self._a_w, self._cz, self._c,
                               self._e_scale, self._chroma_scale)

    def _reverse_raw(self, jch: ArrayFloat) -> ArrayFloat:
        rgb_p = _reverse_kernel(jch, self._f_l, self._n_bb, self._a_w,
                                self._inv_cz, self._e_scale, self._chroma_scale)
        return np.dot(rgb_p, self.reverse_matrix_t) / 100.0

    def _lightness_raw(self, xyz: ArrayFloat) -> ArrayFloat:
        return _lightness_kernel(self._to_cone_raw(xyz), self._f_l,
                                 self._n_bb, self._a_w, self._cz)

    # =====================================================================
    #  Public array API
    # =====================================================================

    def forward(self, stimulus: ArrayFloat) -> ArrayFloat:
        """
        Computes all seven correlates.

        Args:
            stimulus: Relative XYZ (Y = 1.0 for white), shape (3,) or (N, 3).

        Returns:
            Array of shape (7,) or (N, 7) ordered J, Q, C, M, s, H, h.
        """
        return handle_shapes(self._forward_raw)(stimulus)

    def reverse_jch(self, jch: ArrayFloat) -> ArrayFloat:
        """
        Reconstructs stimuli from lightness, chroma and hue angle.

        Args:
            jch: Correlates (J, C, h), shape (3,) or (N, 3).

        Returns:
            Relative XYZ with the same shape as the input.
        """
        return handle_shapes(self._reverse_raw)(jch)

    def lightness(self, stimulus: ArrayFloat) -> ArrayFloat:
        """
        Computes lightness J only, skipping the chromatic stages.

        Returns:
            A float for a single triple, shape (N,) otherwise.
        """
        res = handle_shapes(self._lightness_raw)(stimulus)
        if np.ndim(res) == 0:
            return float(res)
        return res

    def forward_vector(self, stimulus: ArrayFloat) -> AppearanceVector:
        """Forward transform of a single stimulus as an AppearanceVector."""
        return AppearanceVector.from_array(self.forward(np.asarray(stimulus, dtype=np.float64).reshape(3)))

    def reverse(self, correlates: AppearanceVector) -> ArrayFloat:
        """
        Reconstructs the stimulus from a (possibly partial) appearance.

        Missing J, C or h are derived from the other slots first.

        Raises:
            IncompleteConfigurationError: If J, C and h cannot all be derived.
        """
        vec = self.complete(correlates.copy())
        required = (Correlate.J, Correlate.C, Correlate.h)
        gaps = vec.missing(required)
        if gaps:
            given = "".join(c.name for c in Correlate if correlates.is_set(c))
            raise IncompleteConfigurationError(given or "-", "JCh", tuple(g.name for g in gaps))
        return self.reverse_jch(vec.select(required))

    # =====================================================================
    #  Scalar relations between correlates
    # =====================================================================

    def brightness_from_lightness(self, J: float) -> Optional[float]:
        """Q = (4/c)·sqrt(J/100)·(A_w + 4)·F_L^0.25."""
        if not _finite(J) or J < 0.0:
            return None
        return (4.0 / self._c) * np.sqrt(J / 100.0) * (self._a_w + 4.0) * self._fl4

    def lightness_from_brightness(self, Q: float) -> Optional[float]:
        """J = 6.25·(c·Q / ((A_w + 4)·F_L^0.25))²."""
        if not _finite(Q) or Q < 0.0:
            return None
        return 6.25 * (self._c * Q / ((self._a_w + 4.0) * self._fl4)) ** 2

    def colorfulness_from_chroma(self, C: float) -> Optional[float]:
        if not _finite(C):
            return None
        return C * self._fl4

    def chroma_from_colorfulness(self, M: float) -> Optional[float]:
        if not _finite(M):
            return None
        return M / self._fl4

    def chroma_from_saturation(self, s: float, Q: float) -> Optional[float]:
        """C = (s/100)²·Q / F_L^0.25."""
        if not _finite(s, Q) or Q < 0.0:
            return None
        return (s / 100.0) ** 2 * Q / self._fl4

    @staticmethod
    def saturation_from_colorfulness(M: float, Q: float) -> Optional[float]:
        """s = 100·sqrt(M/Q); zero for black (M = Q = 0)."""
        if not _finite(M, Q) or Q < 0.0:
            return None
        if M == 0.0:
            return 0.0
        if Q == 0.0 or M / Q < 0.0:
            return None
        return 100.0 * np.sqrt(M / Q)

    # =====================================================================
    #  Completion of partial appearances
    # =====================================================================

    def fill_forward(self, vec: AppearanceVector) -> AppearanceVector:
        """
        Single ordered pass deriving J↔Q, C, M, s and H from what is set.

        Slots whose relation is undefined for the given inputs stay unset.
        """
        K = Correlate
        if not vec.is_set(K.J) and vec.is_set(K.Q):
            vec[K.J] = self.lightness_from_brightness(vec[K.Q])
        if not vec.is_set(K.Q) and vec.is_set(K.J):
            vec[K.Q] = self.brightness_from_lightness(vec[K.J])
        if not vec.is_set(K.C):
            if vec.is_set(K.M):
                vec[K.C] = self.chroma_from_colorfulness(vec[K.M])
            elif vec.is_set(K.s) and vec.is_set(K.Q):
                vec[K.C] = self.chroma_from_saturation(vec[K.s], vec[K.Q])
        if not vec.is_set(K.M) and vec.is_set(K.C):
            vec[K.M] = self.colorfulness_from_chroma(vec[K.C])
        if not vec.is_set(K.s) and vec.is_set(K.M) and vec.is_set(K.Q):
            vec[K.s] = self.saturation_from_colorfulness(vec[K.M], vec[K.Q])
        if not vec.is_set(K.H) and vec.is_set(K.h):
            h = vec[K.h]
            vec[K.H] = hue_quadrature(h) if _finite(h) else None
        return vec

    def fill_reverse(self, vec: AppearanceVector) -> AppearanceVector:
        """Derives the hue angle from hue composition."""
        if not vec.is_set(Correlate.h) and vec.is_set(Correlate.H):
            H = vec[Correlate.H]
            vec[Correlate.h] = hue_angle_from_quadrature(H) if _finite(H) else None
        return vec

    def complete(self, vec: AppearanceVector) -> AppearanceVector:
        """
        Fills as many slots as possible: forward, reverse, forward.

        Mutates and returns ``vec``.  Slots that cannot be derived remain
        unset; callers decide whether that is an error.
        """
        self.fill_forward(vec)
        self.fill_reverse(vec)
        self.fill_forward(vec)
        if not vec.is_complete:
            logger.debug("Appearance left incomplete: missing %s",
                         [c.name for c in vec.missing()])
        return vec


# =============================================================================
# 5. MODULE-LEVEL API
# =============================================================================

@functools.lru_cache(maxsize=32)
def get_transform(conditions: "ViewingConditions") -> CIECAM02Transform:
    """Returns the shared transform for ``conditions`` (cached per instance value)."""
    return CIECAM02Transform(conditions)

def forward(stimulus: ArrayFloat, conditions: "ViewingConditions") -> ArrayFloat:
    """Stimulus (3,) or (N, 3) → correlates (7,) or (N, 7)."""
    return get_transform(conditions).forward(stimulus)

def reverse(correlates: AppearanceVector, conditions: "ViewingConditions") -> ArrayFloat:
    """Partial AppearanceVector → stimulus (3,)."""
    return get_transform(conditions).reverse(correlates)

def reverse_jch(jch: ArrayFloat, conditions: "ViewingConditions") -> ArrayFloat:
    """(J, C, h) triples (3,) or (N, 3) → stimulus of the same shape."""
    return get_transform(conditions).reverse_jch(jch)
