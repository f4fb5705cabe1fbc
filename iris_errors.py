# -*- coding: utf-8 -*-
"""
Iris: Perceptual colour appearance under real viewing conditions
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Error Types
===========
Every failure in Iris is local and deterministic, so none of these are
meant to be retried.  Each type also derives from the builtin a caller
would naturally catch (``ValueError`` / ``TypeError``), which keeps plain
``except ValueError`` handlers working.
"""

__all__ = [
    "AppearanceError",
    "InvalidViewingConditions",
    "ComponentCountMismatch",
    "IncompleteConfigurationError",
    "UnsupportedTargetError",
    "MismatchedConfiguration",
]


class AppearanceError(Exception):
    """Base class for all Iris errors."""


class InvalidViewingConditions(AppearanceError, ValueError):
    """Non-positive luminance, unknown surround or malformed white point."""


class ComponentCountMismatch(AppearanceError, ValueError):
    """Input array does not carry the number of components the space needs."""


class IncompleteConfigurationError(AppearanceError, ValueError):
    """Reconfiguration could not fill every slot of the target selection."""

    def __init__(self, source: str, target: str, missing: tuple[str, ...]) -> None:
        self.source = source
        self.target = target
        self.missing = missing
        super().__init__(
            f"Cannot reconfigure {source} -> {target}: "
            f"correlates {', '.join(missing)} remain unresolved."
        )


class UnsupportedTargetError(AppearanceError, TypeError):
    """Operation requested into a space family that does not support it."""


class MismatchedConfiguration(AppearanceError, ValueError):
    """Arithmetic attempted between colours living in different spaces."""
