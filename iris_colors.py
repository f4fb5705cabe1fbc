# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Colours & Colour Spaces
=======================
A ``Color`` is three components plus alpha, tagged with the space that
gives them meaning.  Spaces form a small closed family:

    StimulusSpace     relative CIE XYZ (``XYZ``)
    DeviceSpace       gamma-encoded sRGB (``SRGB``)
    AppearanceSpace   CIECAM02 correlates under given viewing conditions,
                      in polar (L, c, hue) or Cartesian (L, a, b) form

Conversions are free functions dispatched on the space kind.  Colours
never mutate; every operation returns a new ``Color``.

Rework notes:
- Between two appearance spaces with identical viewing conditions,
  ``convert`` reconfigures the correlates directly.  Everything else goes
  through the stimulus.
- ``transpose`` reinterprets correlates under other viewing conditions
  without re-deriving them.  It is an approximation: it asserts, rather
  than computes, constant appearance across environments.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Final, Literal, Optional, Sequence, Tuple, Union

from iris_cam import get_transform
from iris_correlates import (
    CorrelateConfiguration,
    JCh,
    cartesian_to_polar,
    hue_difference,
    polar_to_cartesian,
    reconfigure_values,
)
from iris_errors import ComponentCountMismatch, MismatchedConfiguration, UnsupportedTargetError
from iris_stimulus import ArrayFloat, StimulusEngine
from iris_viewing import ViewingConditions

__all__ = [
    "SpaceKind",
    "StimulusSpace",
    "DeviceSpace",
    "AppearanceSpace",
    "ColorSpace",
    "XYZ",
    "SRGB",
    "Color",
    "to_stimulus",
    "from_stimulus",
    "convert",
    "reconfigure",
    "transpose",
    "blend",
    "blend_many",
    "average",
]

logger = logging.getLogger(__name__)

SpaceKind = Literal["stimulus", "device", "appearance"]


# =============================================================================
# 1. SPACES
# =============================================================================

@dataclass(slots=True, frozen=True)
class StimulusSpace:
    """Relative CIE XYZ, Y = 1.0 for the perfect diffuse white."""
    kind: SpaceKind = field(default="stimulus", init=False)

    @property
    def component_names(self) -> Tuple[str, str, str]:
        return ("X", "Y", "Z")

    @property
    def name(self) -> str:
        return "XYZ"


@dataclass(slots=True, frozen=True)
class DeviceSpace:
    """Gamma-encoded sRGB (IEC 61966-2-1), nominal range [0, 1]."""
    kind: SpaceKind = field(default="device", init=False)

    @property
    def component_names(self) -> Tuple[str, str, str]:
        return ("R", "G", "B")

    @property
    def name(self) -> str:
        return "sRGB"


@dataclass(slots=True, frozen=True)
class AppearanceSpace:
    """
    CIECAM02 appearance space.

    Args:
        conditions: Viewing environment the correlates refer to.
        configuration: Which lightness / chroma / hue correlates are held.
        cartesian: If True the hue axis is expanded into (a, b).
    """
    conditions: ViewingConditions
    configuration: CorrelateConfiguration = JCh
    cartesian: bool = False
    kind: SpaceKind = field(default="appearance", init=False)

    def __post_init__(self) -> None:
        if isinstance(self.configuration, str):
            object.__setattr__(self, "configuration",
                               CorrelateConfiguration.from_name(self.configuration))

    @classmethod
    def polar(cls, conditions: ViewingConditions,
              configuration: Union[CorrelateConfiguration, str] = JCh) -> "AppearanceSpace":
        return cls(conditions, configuration, False)  # type: ignore[arg-type]

    @classmethod
    def cartesian_of(cls, conditions: ViewingConditions,
                     configuration: Union[CorrelateConfiguration, str] = JCh) -> "AppearanceSpace":
        return cls(conditions, configuration, True)  # type: ignore[arg-type]

    def polar_form(self) -> "AppearanceSpace":
        return AppearanceSpace(self.conditions, self.configuration, False)

    def cartesian_form(self) -> "AppearanceSpace":
        return AppearanceSpace(self.conditions, self.configuration, True)

    @property
    def component_names(self) -> Tuple[str, str, str]:
        cfg = self.configuration
        if self.cartesian:
            return (cfg.lightness.name, "a", "b")
        return (cfg.lightness.name, cfg.chroma.name, cfg.hue.name)

    @property
    def name(self) -> str:
        return self.configuration.name + (" (Cartesian)" if self.cartesian else "")


ColorSpace = Union[StimulusSpace, DeviceSpace, AppearanceSpace]

XYZ: Final[StimulusSpace] = StimulusSpace()
SRGB: Final[DeviceSpace] = DeviceSpace()


# =============================================================================
# 2. COLOR
# =============================================================================

@dataclass(slots=True, frozen=True)
class Color:
    """
    Immutable colour: three components, alpha and the space they live in.

    Raises:
        ComponentCountMismatch: If ``values`` does not hold 3 numbers.
    """
    values: Tuple[float, float, float]
    space: ColorSpace
    alpha: float = 1.0

    def __post_init__(self) -> None:
        arr = np.asarray(self.values, dtype=np.float64)
        if arr.shape != (3,):
            raise ComponentCountMismatch(
                f"{self.space.name} needs 3 components, got shape {arr.shape}"
            )
        object.__setattr__(self, "values", tuple(float(v) for v in arr))
        object.__setattr__(self, "alpha", float(self.alpha))

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    def __repr__(self) -> str:
        comps = ", ".join(f"{n}={v:.4f}" for n, v in zip(self.space.component_names, self.values))
        return f"Color({self.space.name}: {comps}, alpha={self.alpha:.3f})"

    def get(self, component: str) -> float:
        """Component by name, e.g. ``color.get("J")``."""
        try:
            return self.values[self.space.component_names.index(component)]
        except ValueError:
            raise KeyError(f"{self.space.name} has no component '{component}'") from None

    def as_array(self) -> ArrayFloat:
        return np.array(self.values, dtype=np.float64)

    def with_values(self, values: Union[ArrayFloat, Sequence[float]]) -> "Color":
        return Color(tuple(np.asarray(values, dtype=np.float64).tolist()), self.space, self.alpha)


# =============================================================================
# 3. CONVERSION
# =============================================================================

def _polar_values(color: Color) -> ArrayFloat:
    space = color.space
    if not isinstance(space, AppearanceSpace):
        raise UnsupportedTargetError(f"{space!r} is not an appearance space")
    if space.cartesian:
        return cartesian_to_polar(color.as_array(), space.configuration)
    return color.as_array()

def _from_polar(values: ArrayFloat, space: AppearanceSpace, alpha: float) -> Color:
    if space.cartesian:
        values = polar_to_cartesian(values, space.configuration)
    return Color(tuple(values.tolist()), space, alpha)

def to_stimulus(color: Color) -> ArrayFloat:
    """Relative XYZ of any colour."""
    space = color.space
    if isinstance(space, StimulusSpace):
        return color.as_array()
    if isinstance(space, DeviceSpace):
        return StimulusEngine.srgb_to_xyz(color.as_array())
    if isinstance(space, AppearanceSpace):
        vec = space.configuration.expand(_polar_values(color))
        return get_transform(space.conditions).reverse(vec)
    raise UnsupportedTargetError(f"Unknown colour space {space!r}")

def from_stimulus(xyz: ArrayFloat, space: ColorSpace, alpha: float = 1.0) -> Color:
    """Builds a colour in ``space`` from relative XYZ."""
    xyz = np.asarray(xyz, dtype=np.float64)
    if isinstance(space, StimulusSpace):
        return Color(tuple(xyz.tolist()), space, alpha)
    if isinstance(space, DeviceSpace):
        return Color(tuple(StimulusEngine.xyz_to_srgb(xyz).tolist()), space, alpha)
    if isinstance(space, AppearanceSpace):
        full = get_transform(space.conditions).forward(xyz)
        return _from_polar(space.configuration.project(full), space, alpha)
    raise UnsupportedTargetError(f"Unknown colour space {space!r}")

def convert(color: Color, space: ColorSpace) -> Color:
    """
    Converts a colour into another space, keeping alpha.

    Raises:
        IncompleteConfigurationError: If an appearance colour cannot be
            completed to J, C and h.
        UnsupportedTargetError: For an unrecognised space object.
    """
    src = color.space
    if src == space:
        return color
    if (isinstance(src, AppearanceSpace) and isinstance(space, AppearanceSpace)
            and src.conditions == space.conditions):
        values = reconfigure_values(_polar_values(color), src.configuration,
                                    space.configuration, src.conditions)
        return _from_polar(values, space, color.alpha)
    return from_stimulus(to_stimulus(color), space, color.alpha)

def reconfigure(color: Color, target: Union[CorrelateConfiguration, str]) -> Color:
    """
    Re-expresses an appearance colour with other correlates, same conditions.

    Raises:
        UnsupportedTargetError: If ``color`` is not an appearance colour.
        IncompleteConfigurationError: If a target correlate cannot be derived.
    """
    space = color.space
    if not isinstance(space, AppearanceSpace):
        raise UnsupportedTargetError(f"Cannot reconfigure a {space.name} colour")
    if isinstance(target, str):
        target = CorrelateConfiguration.from_name(target)
    values = reconfigure_values(_polar_values(color), space.configuration,
                                target, space.conditions)
    return _from_polar(values, AppearanceSpace(space.conditions, target, space.cartesian), color.alpha)

def transpose(color: Color, target: Union[ViewingConditions, AppearanceSpace]) -> Color:
    """
    Reads an appearance under other viewing conditions.

    The colour is first reconfigured to the target correlates within its
    own conditions; the resulting numbers are then taken as-is under the
    target conditions.  No colour-constancy solve takes place.

    Args:
        color: An appearance colour.
        target: Either viewing conditions (configuration and form are kept)
                or a full ``AppearanceSpace``.

    Raises:
        UnsupportedTargetError: If ``color`` or ``target`` is not
            appearance-based.
        IncompleteConfigurationError: If reconfiguration fails.
    """
    space = color.space
    if not isinstance(space, AppearanceSpace):
        raise UnsupportedTargetError(f"Transposition needs an appearance colour, got {space.name}")
    if isinstance(target, ViewingConditions):
        target = AppearanceSpace(target, space.configuration, space.cartesian)
    elif not isinstance(target, AppearanceSpace):
        raise UnsupportedTargetError(
            f"Transposition supports only appearance targets, got {getattr(target, 'name', target)!r}"
        )

    values = _polar_values(color)
    if target.configuration != space.configuration:
        values = reconfigure_values(values, space.configuration, target.configuration,
                                    space.conditions)
    if target.conditions != space.conditions:
        logger.debug("Transposing %s from %s to %s without re-derivation",
                     color, space.conditions, target.conditions)
    return _from_polar(values, target, color.alpha)


# =============================================================================
# 4. BLENDING
# =============================================================================

def _check_same_space(colors: Sequence[Color]) -> ColorSpace:
    space = colors[0].space
    for c in colors[1:]:
        if c.space != space:
            raise MismatchedConfiguration(
                f"Cannot combine colours from {space.name} and {c.space.name}; convert first"
            )
    return space

def blend(a: Color, b: Color, weight: float) -> Color:
    """
    Interpolates from ``a`` (weight 0) to ``b`` (weight 1).

    Polar appearance colours move along the shortest hue arc; every other
    space blends component-wise.  Alpha blends linearly.

    Raises:
        MismatchedConfiguration: If the colours live in different spaces.
    """
    space = _check_same_space((a, b))
    if weight <= 0.0:
        return a
    if weight >= 1.0:
        return b

    va, vb = a.as_array(), b.as_array()
    out = va + (vb - va) * weight
    if isinstance(space, AppearanceSpace) and not space.cartesian:
        modulus = space.configuration.hue_modulus
        out[2] = (va[2] + hue_difference(va[2], vb[2], modulus) * weight) % modulus
    alpha = a.alpha + (b.alpha - a.alpha) * weight
    return Color(tuple(out.tolist()), space, alpha)

def blend_many(colors: Sequence[Color], weights: Optional[Sequence[float]] = None) -> Color:
    """
    Weighted mean of several colours.

    Appearance colours are averaged in their Cartesian form and returned
    in the input form.  Weights are used as given (not renormalised);
    ``None`` means equal weights summing to one.

    Raises:
        MismatchedConfiguration: If the colours live in different spaces.
        ValueError: If ``colors`` is empty or weights have the wrong length.
    """
    if not colors:
        raise ValueError("blend_many needs at least one colour")
    space = _check_same_space(colors)
    n = len(colors)
    w = np.full(n, 1.0 / n) if weights is None else np.asarray(weights, dtype=np.float64)
    if w.shape != (n,):
        raise ValueError(f"Expected {n} weights, got {w.shape}")

    values = np.array([c.values for c in colors], dtype=np.float64)
    polar = isinstance(space, AppearanceSpace) and not space.cartesian
    if polar:
        values = polar_to_cartesian(values, space.configuration)
    acc = w @ values
    if polar:
        acc = cartesian_to_polar(acc, space.configuration)
    alpha = float(w @ np.array([c.alpha for c in colors]))
    return Color(tuple(acc.tolist()), space, alpha)

def average(colors: Sequence[Color]) -> Color:
    """Unweighted mean, see :func:`blend_many`."""
    return blend_many(colors)
