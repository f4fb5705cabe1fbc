# -*- coding: utf-8 -*-
# Iris: Perceptual colour appearance under real viewing conditions.
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for the opticsWolf Iris colour appearance engine.
"""

from typing import Final, Tuple

# Metadata Definitions
__title__: Final[str] = "Iris"
__description__: Final[str] = (
    "A JIT-compiled CIECAM02 colour appearance engine for perceptual "
    "distance, blending, gamut-boundary search and palette generation."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"
__url__: Final[str] = "https://github.com/opticsWolf/iris"

version_info: Final[Tuple[int, ...]] = tuple(int(p) for p in __version__.split("."))

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "author": __author__,
        "license": __license__,
        "url": __url__,
        "description": __description__,
        "copyright": __copyright__,
    }
