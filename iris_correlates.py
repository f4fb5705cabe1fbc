# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Correlate Configurations
========================
A *configuration* picks three of the seven CIECAM02 correlates, one from
each family:

    lightness axis    {J, Q}
    chroma axis       {C, M, s}
    hue axis          {h, H}

giving twelve appearance spaces (JCh, JMh, QsH, ...).  Values can be moved
between configurations without going back to the stimulus: the source
triple is expanded into an ``AppearanceVector`` and completed with the
scalar relations of ``CIECAM02Transform``.

The Cartesian form expands the hue axis into (a, b).  The angular unit
follows the hue correlate: degrees for h (modulus 360) and gon-like
quadrature units for H (modulus 400).
"""

import logging
import math
import numpy as np
from dataclasses import dataclass
from numba import njit
from typing import Final, Tuple, Union, TYPE_CHECKING

from iris_cam import AppearanceVector, Correlate, get_transform
from iris_errors import ComponentCountMismatch, IncompleteConfigurationError
from iris_stimulus import ArrayFloat, handle_shapes

if TYPE_CHECKING:
    from iris_viewing import ViewingConditions

__all__ = [
    "CorrelateConfiguration",
    "LIGHTNESS_CORRELATES",
    "CHROMA_CORRELATES",
    "HUE_CORRELATES",
    "ALL_CONFIGURATIONS",
    "JCh", "JCH", "JMh", "JMH", "Jsh", "JsH",
    "QCh", "QCH", "QMh", "QMH", "Qsh", "QsH",
    "reconfigure_values",
    "polar_to_cartesian",
    "cartesian_to_polar",
    "hue_difference",
    "hue_distance",
]

logger = logging.getLogger(__name__)

LIGHTNESS_CORRELATES: Final[Tuple[Correlate, ...]] = (Correlate.J, Correlate.Q)
CHROMA_CORRELATES: Final[Tuple[Correlate, ...]] = (Correlate.C, Correlate.M, Correlate.s)
HUE_CORRELATES: Final[Tuple[Correlate, ...]] = (Correlate.h, Correlate.H)

CorrelateLike = Union[Correlate, str, int]


def _as_correlate(value: CorrelateLike) -> Correlate:
    if isinstance(value, Correlate):
        return value
    if isinstance(value, str):
        return Correlate.from_name(value)
    return Correlate(value)


# =============================================================================
# 1. CONFIGURATION
# =============================================================================

@dataclass(slots=True, frozen=True)
class CorrelateConfiguration:
    """
    Ordered (lightness, chroma, hue) selection of correlates.

    Args:
        lightness: J or Q.
        chroma: C, M or s.
        hue: h or H.

    Raises:
        ValueError: If a correlate is drawn from the wrong family.
    """
    lightness: Correlate
    chroma: Correlate
    hue: Correlate

    def __post_init__(self) -> None:
        picks = (_as_correlate(self.lightness), _as_correlate(self.chroma), _as_correlate(self.hue))
        families = (LIGHTNESS_CORRELATES, CHROMA_CORRELATES, HUE_CORRELATES)
        for pick, family in zip(picks, families):
            if pick not in family:
                raise ValueError(
                    f"Correlate {pick.name} is not one of {[c.name for c in family]}"
                )
        object.__setattr__(self, "lightness", picks[0])
        object.__setattr__(self, "chroma", picks[1])
        object.__setattr__(self, "hue", picks[2])

    @classmethod
    def from_name(cls, name: str) -> "CorrelateConfiguration":
        """Parses a three-letter name such as ``"JCh"`` or ``"QsH"``."""
        if len(name) != 3:
            raise ValueError(f"Configuration name must have 3 letters, got '{name}'")
        return cls(*(Correlate.from_name(ch) for ch in name))

    @property
    def name(self) -> str:
        return self.lightness.name + self.chroma.name + self.hue.name

    @property
    def indices(self) -> Tuple[Correlate, Correlate, Correlate]:
        return (self.lightness, self.chroma, self.hue)

    @property
    def hue_modulus(self) -> float:
        """360 for hue angle h, 400 for hue composition H."""
        return 360.0 if self.hue is Correlate.h else 400.0

    @property
    def radians_per_unit(self) -> float:
        return 2.0 * np.pi / self.hue_modulus

    def __repr__(self) -> str:
        return f"CorrelateConfiguration('{self.name}')"

    def project(self, correlates: ArrayFloat) -> ArrayFloat:
        """Selects this configuration's columns from (7,) or (N, 7) correlates."""
        arr = np.asarray(correlates, dtype=np.float64)
        if arr.shape[-1] != 7:
            raise ComponentCountMismatch(f"Expected 7 correlates, got {arr.shape[-1]}")
        return arr[..., [int(i) for i in self.indices]]

    def expand(self, values: ArrayFloat) -> AppearanceVector:
        """Places a single triple into an otherwise unset AppearanceVector."""
        vals = np.asarray(values, dtype=np.float64)
        if vals.shape != (3,):
            raise ComponentCountMismatch(f"Expected 3 components, got shape {vals.shape}")
        vec = AppearanceVector()
        for key, v in zip(self.indices, vals):
            vec[key] = float(v)
        return vec


JCh: Final = CorrelateConfiguration(Correlate.J, Correlate.C, Correlate.h)
JCH: Final = CorrelateConfiguration(Correlate.J, Correlate.C, Correlate.H)
JMh: Final = CorrelateConfiguration(Correlate.J, Correlate.M, Correlate.h)
JMH: Final = CorrelateConfiguration(Correlate.J, Correlate.M, Correlate.H)
Jsh: Final = CorrelateConfiguration(Correlate.J, Correlate.s, Correlate.h)
JsH: Final = CorrelateConfiguration(Correlate.J, Correlate.s, Correlate.H)
QCh: Final = CorrelateConfiguration(Correlate.Q, Correlate.C, Correlate.h)
QCH: Final = CorrelateConfiguration(Correlate.Q, Correlate.C, Correlate.H)
QMh: Final = CorrelateConfiguration(Correlate.Q, Correlate.M, Correlate.h)
QMH: Final = CorrelateConfiguration(Correlate.Q, Correlate.M, Correlate.H)
Qsh: Final = CorrelateConfiguration(Correlate.Q, Correlate.s, Correlate.h)
QsH: Final = CorrelateConfiguration(Correlate.Q, Correlate.s, Correlate.H)

ALL_CONFIGURATIONS: Final[Tuple[CorrelateConfiguration, ...]] = (
    JCh, JCH, JMh, JMH, Jsh, JsH,
    QCh, QCH, QMh, QMH, Qsh, QsH,
)


# =============================================================================
# 2. RECONFIGURATION
# =============================================================================

def _reconfigure_one(values: ArrayFloat, source: CorrelateConfiguration,
                     target: CorrelateConfiguration, conditions: "ViewingConditions") -> ArrayFloat:
    vec = get_transform(conditions).complete(source.expand(values))
    gaps = vec.missing(target.indices)
    if gaps:
        names = tuple(g.name for g in gaps)
        logger.debug("Reconfiguration %s -> %s failed for %s: %s unresolved",
                     source.name, target.name, values, names)
        raise IncompleteConfigurationError(source.name, target.name, names)
    return vec.select(target.indices)

def reconfigure_values(values: ArrayFloat, source: CorrelateConfiguration,
                       target: CorrelateConfiguration, conditions: "ViewingConditions") -> ArrayFloat:
    """
    Re-expresses appearance triples in another configuration.

    Works purely on the correlates (forward, reverse, forward fill); the
    stimulus is never reconstructed.

    Args:
        values: Source triples, shape (3,) or (N, 3).
        source: Configuration the values are expressed in.
        target: Desired configuration.
        conditions: ``ViewingConditions`` the values refer to.

    Returns:
        Target triples with the same shape as ``values``.

    Raises:
        IncompleteConfigurationError: If a target slot cannot be derived,
            e.g. saturation from zero brightness with non-zero colourfulness.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape[-1] != 3 or arr.ndim > 2:
        raise ComponentCountMismatch(f"Expected shape (3,) or (N, 3), got {arr.shape}")
    if source == target:
        return arr.copy()
    if arr.ndim == 1:
        return _reconfigure_one(arr, source, target, conditions)
    out = np.empty_like(arr)
    for i in range(arr.shape[0]):
        out[i] = _reconfigure_one(arr[i], source, target, conditions)
    return out


# =============================================================================
# 3. POLAR <-> CARTESIAN
# =============================================================================

@njit(cache=True, fastmath=True)
def _polar_to_cartesian_kernel(lch: ArrayFloat, rad_per_unit: float) -> ArrayFloat:
    """
    (L, c, h) → (L, a, b).  Input shape (N, 3), Output shape (N, 3).
    """
    n = lch.shape[0]
    lab = np.empty_like(lch)

    for i in range(n):
        L, c, h = lch[i, 0], lch[i, 1], lch[i, 2]
        h_rad = h * rad_per_unit
        lab[i, 0] = L
        lab[i, 1] = c * np.cos(h_rad)
        lab[i, 2] = c * np.sin(h_rad)
    return lab

@njit(cache=True, fastmath=True)
def _cartesian_to_polar_kernel(lab: ArrayFloat, rad_per_unit: float, modulus: float) -> ArrayFloat:
    """
    (L, a, b) → (L, c, h) with h wrapped into [0, modulus).
    """
    n = lab.shape[0]
    lch = np.empty_like(lab)

    for i in range(n):
        L, a, b = lab[i, 0], lab[i, 1], lab[i, 2]
        h = np.arctan2(b, a) / rad_per_unit
        if h < 0: h += modulus
        if h >= modulus: h -= modulus
        lch[i, 0], lch[i, 1], lch[i, 2] = L, np.hypot(a, b), h
    return lch

@handle_shapes
def polar_to_cartesian(values: ArrayFloat, configuration: CorrelateConfiguration) -> ArrayFloat:
    """
    Expands the hue axis of a configuration into orthogonal (a, b).

    Args:
        values: (lightness, chroma, hue) in ``configuration``, (3,) or (N, 3).
        configuration: Determines the hue unit (degrees for h, 400 units for H).
    """
    return _polar_to_cartesian_kernel(values, configuration.radians_per_unit)

@handle_shapes
def cartesian_to_polar(values: ArrayFloat, configuration: CorrelateConfiguration) -> ArrayFloat:
    """Inverse of :func:`polar_to_cartesian`; negative angles wrap around."""
    return _cartesian_to_polar_kernel(values, configuration.radians_per_unit,
                                      configuration.hue_modulus)


# =============================================================================
# 4. HUE ARITHMETIC
# =============================================================================

def hue_difference(hue1: float, hue2: float, modulus: float = 360.0) -> float:
    """
    Signed shortest step from ``hue1`` to ``hue2``.

    Result lies in [-modulus/2, modulus/2] and satisfies
    ``(hue1 + hue_difference(hue1, hue2)) % modulus == hue2 % modulus``.
    """
    diff = math.fmod(hue2 - hue1, modulus)
    if diff > modulus / 2.0:
        diff -= modulus
    elif diff < -modulus / 2.0:
        diff += modulus
    return float(diff)

def hue_distance(hue1: float, hue2: float, modulus: float = 360.0) -> float:
    """Unsigned shortest angular distance, in [0, modulus/2]."""
    return abs(hue_difference(hue1, hue2, modulus))
