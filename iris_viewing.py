# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Viewing Conditions
==================
Immutable description of a viewing environment and the CIECAM02
adaptation constants derived from it.

A ``ViewingConditions`` is defined by four inputs (adopted white point,
adapting luminance L_A, background luminance Y_b and surround) plus the
adaptation mode.  Every derived constant is computed once in
``__post_init__`` and never recomputed; equality and hashing only look at
the inputs, so instances can key caches (see ``iris_cam.get_transform``).

Standard environments are built lazily by ``get_standard_conditions``
and shared afterwards.

References:
    - CIE 159:2004, section 4 (input data) and 9 (worked example).
    - IEC 61966-2-1:1999 Annex (sRGB reference viewing environment).
"""

import functools
import logging
import warnings
import numpy as np
from dataclasses import dataclass, field
from typing import Final, Literal, Tuple, get_args

from iris_cam import M_CAT02_T, M_CAT02_TO_HPE_T, _compress
from iris_errors import InvalidViewingConditions
from iris_stimulus import xyY_to_xyz

__all__ = [
    # --- Types ---
    "AdaptationMode",
    "Surround",
    "ViewingConditions",

    # --- Constants ---
    "SURROUND_AVERAGE",
    "SURROUND_DIM",
    "SURROUND_DARK",
    "ILLUMINANT_D50",
    "ILLUMINANT_D65",
    "ILLUMINANT_E",
    "ILLUMINANT_F2",
    "ILLUMINANT_F7",
    "ILLUMINANT_F11",
    "STANDARD_CONDITIONS",

    # --- Functions ---
    "get_standard_conditions",
]

logger = logging.getLogger(__name__)

AdaptationMode = Literal["partial", "full"]

WhitePoint = Tuple[float, float, float]


# =============================================================================
# 1. SURROUND
# =============================================================================

@dataclass(slots=True, frozen=True)
class Surround:
    """
    Surround class constants.

    Attributes:
        name: Identifier ("average", "dim", "dark").
        f: Factor determining degree of adaptation, F.
        c: Impact of surround, c.
        n_c: Chromatic induction factor, N_c.
    """
    name: str
    f: float
    c: float
    n_c: float

    @classmethod
    def from_name(cls, name: str) -> "Surround":
        try:
            return _SURROUNDS[name.lower()]
        except (KeyError, AttributeError):
            raise InvalidViewingConditions(
                f"Unknown surround '{name}'. Expected one of {sorted(_SURROUNDS)}"
            ) from None


SURROUND_AVERAGE: Final[Surround] = Surround("average", 1.0, 0.69, 1.0)
SURROUND_DIM: Final[Surround] = Surround("dim", 0.9, 0.59, 0.95)
SURROUND_DARK: Final[Surround] = Surround("dark", 0.8, 0.525, 0.8)

_SURROUNDS: Final[dict[str, Surround]] = {
    s.name: s for s in (SURROUND_AVERAGE, SURROUND_DIM, SURROUND_DARK)
}


# =============================================================================
# 2. ILLUMINANTS (Y = 100)
# =============================================================================

ILLUMINANT_D50: Final[WhitePoint] = (96.422, 100.0, 82.521)
ILLUMINANT_D65: Final[WhitePoint] = (95.047, 100.0, 108.883)
ILLUMINANT_E: Final[WhitePoint] = (100.0, 100.0, 100.0)

def _white_from_chromaticity(x: float, y: float) -> WhitePoint:
    xyz = xyY_to_xyz(np.array([x, y, 100.0]))
    return (float(xyz[0]), float(xyz[1]), float(xyz[2]))

# Fluorescent: F2 cool white, F7 broadband daylight, F11 narrow tri-band.
ILLUMINANT_F2: Final[WhitePoint] = _white_from_chromaticity(0.37208, 0.37529)
ILLUMINANT_F7: Final[WhitePoint] = _white_from_chromaticity(0.31292, 0.32933)
ILLUMINANT_F11: Final[WhitePoint] = _white_from_chromaticity(0.38052, 0.37713)


# =============================================================================
# 3. VIEWING CONDITIONS
# =============================================================================

def _positive_finite(value: float) -> bool:
    return bool(np.isfinite(value)) and value > 0.0

@dataclass(slots=True, frozen=True)
class ViewingConditions:
    """
    A CIECAM02 viewing environment.

    Args:
        white_point: Adopted white XYZ on the Y = 100 scale.
        adapting_luminance: L_A in cd/m², typically 20 % of the white
            luminance.  Must be > 0.
        background_luminance: Relative background luminance Y_b (> 0),
            same scale as the white point's Y.
        surround: ``Surround`` instance or its name.
        adaptation: "partial" derives the degree of adaptation D from L_A
            and the surround; "full" assumes complete adaptation (D = 1).

    Raises:
        InvalidViewingConditions: On non-positive or non-finite inputs,
            unknown surround / adaptation mode, or a white point whose
            sharpened cone response is not positive.
    """
    white_point: WhitePoint
    adapting_luminance: float
    background_luminance: float
    surround: Surround = SURROUND_AVERAGE
    adaptation: AdaptationMode = "partial"

    # Derived, excluded from equality and hashing
    d: float = field(init=False, compare=False, repr=False)
    d_rgb: Tuple[float, float, float] = field(init=False, compare=False, repr=False)
    f_l: float = field(init=False, compare=False, repr=False)
    n: float = field(init=False, compare=False, repr=False)
    z: float = field(init=False, compare=False, repr=False)
    n_bb: float = field(init=False, compare=False, repr=False)
    n_cb: float = field(init=False, compare=False, repr=False)
    a_w: float = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        # --- Normalise inputs ---
        if isinstance(self.surround, str):
            object.__setattr__(self, "surround", Surround.from_name(self.surround))
        elif not isinstance(self.surround, Surround):
            raise InvalidViewingConditions(f"Invalid surround: {self.surround!r}")

        if self.adaptation not in get_args(AdaptationMode):
            raise InvalidViewingConditions(
                f"Unknown adaptation mode '{self.adaptation}'. Expected 'partial' or 'full'."
            )

        white = np.asarray(self.white_point, dtype=np.float64)
        if white.shape != (3,) or not np.all(np.isfinite(white)):
            raise InvalidViewingConditions(
                f"White point must be 3 finite tristimulus values, got {self.white_point!r}"
            )
        if white[1] <= 0.0:
            raise InvalidViewingConditions(f"White point luminance must be > 0, got {white[1]}")
        object.__setattr__(self, "white_point", tuple(float(v) for v in white))

        L_A = float(self.adapting_luminance)
        Y_b = float(self.background_luminance)
        if not _positive_finite(L_A):
            raise InvalidViewingConditions(f"Adapting luminance L_A must be > 0, got {L_A}")
        if not _positive_finite(Y_b):
            raise InvalidViewingConditions(f"Background luminance Y_b must be > 0, got {Y_b}")
        object.__setattr__(self, "adapting_luminance", L_A)
        object.__setattr__(self, "background_luminance", Y_b)

        Y_w = white[1]
        if Y_b > Y_w:
            warnings.warn(
                f"Background luminance Y_b={Y_b} exceeds white luminance Y_w={Y_w}; "
                "induction factors are extrapolated.",
                RuntimeWarning, stacklevel=3,
            )

        # --- Degree of adaptation ---
        sur = self.surround
        if self.adaptation == "full":
            D = 1.0
        else:
            D = sur.f * (1.0 - (1.0 / 3.6) * np.exp((-L_A - 42.0) / 92.0))
            D = min(1.0, max(0.0, D))

        rgb_w = np.dot(white, M_CAT02_T)
        if np.any(rgb_w <= 0.0):
            raise InvalidViewingConditions(
                f"White point {self.white_point} has a non-positive cone response {rgb_w}"
            )
        d_rgb = D * Y_w / rgb_w + 1.0 - D

        # --- Luminance-level adaptation ---
        la5 = 5.0 * L_A
        k4 = (1.0 / (la5 + 1.0)) ** 4
        f_l = 0.2 * k4 * la5 + 0.1 * (1.0 - k4) ** 2 * la5 ** (1.0 / 3.0)

        # --- Background induction ---
        n = Y_b / Y_w
        z = 1.48 + np.sqrt(n)
        n_bb = 0.725 * (1.0 / n) ** 0.2

        # --- Achromatic response to white ---
        rgb_pw = np.dot(rgb_w * d_rgb, M_CAT02_TO_HPE_T)
        r, g, b = (_compress(float(v), f_l) for v in rgb_pw)
        a_w = (2.0 * r + g + b / 20.0 - 0.305) * n_bb

        object.__setattr__(self, "d", float(D))
        object.__setattr__(self, "d_rgb", tuple(float(v) for v in d_rgb))
        object.__setattr__(self, "f_l", float(f_l))
        object.__setattr__(self, "n", float(n))
        object.__setattr__(self, "z", float(z))
        object.__setattr__(self, "n_bb", float(n_bb))
        object.__setattr__(self, "n_cb", float(n_bb))
        object.__setattr__(self, "a_w", float(a_w))

        logger.debug("ViewingConditions %s: D=%.6f F_L=%.6f n=%.6f z=%.6f N_bb=%.6f A_w=%.6f",
                     self, D, f_l, n, z, n_bb, a_w)

    @property
    def fl4(self) -> float:
        """F_L^0.25, the luminance-level factor relating C to M."""
        return self.f_l ** 0.25

    @property
    def white_luminance(self) -> float:
        return self.white_point[1]


# =============================================================================
# 4. STANDARD ENVIRONMENTS
# =============================================================================

# name -> (white, L_A, Y_b, surround)
STANDARD_CONDITIONS: Final[dict[str, Tuple[WhitePoint, float, float, Surround]]] = {
    "default": (ILLUMINANT_D65, 64.0, 20.0, SURROUND_AVERAGE),
    "srgb_encoding": (ILLUMINANT_D50, 64.0, 64.0 / 5.0, SURROUND_DIM),
    "srgb_typical": (ILLUMINANT_D50, 200.0, 200.0 / 5.0, SURROUND_AVERAGE),
    "adobe_rgb": (ILLUMINANT_D65, 160.0, 160.0 / 5.0, SURROUND_AVERAGE),
}

@functools.lru_cache(maxsize=None)
def get_standard_conditions(name: str = "default") -> ViewingConditions:
    """
    Returns a shared standard viewing environment.

    Args:
        name: One of ``STANDARD_CONDITIONS``: "default" (D65, L_A 64,
              Y_b 20, average), "srgb_encoding", "srgb_typical",
              "adobe_rgb".

    Raises:
        InvalidViewingConditions: If ``name`` is unknown.
    """
    try:
        white, L_A, Y_b, sur = STANDARD_CONDITIONS[name]
    except KeyError:
        raise InvalidViewingConditions(
            f"Unknown standard conditions '{name}'. Expected one of {sorted(STANDARD_CONDITIONS)}"
        ) from None
    return ViewingConditions(white, L_A, Y_b, sur)
