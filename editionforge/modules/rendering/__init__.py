# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Rendering Module
Public API for compositing one edition.
"""

from editionforge.modules.rendering.background import (
    background_color,
    background_css,
    draw_background,
)
from editionforge.modules.rendering.canvas import (
    BLEND_MODES,
    COMPOSITE_OPERATORS,
    Canvas,
    supported_operations,
)
from editionforge.modules.rendering.gif_recorder import GifRecorder
from editionforge.modules.rendering.record_renderer import (
    load_layer_images,
    render_edition,
)

__all__ = [
    # Canvas
    "Canvas",
    "BLEND_MODES",
    "COMPOSITE_OPERATORS",
    "supported_operations",
    # Background
    "background_css",
    "background_color",
    "draw_background",
    # GIF
    "GifRecorder",
    # Record renderer
    "load_layer_images",
    "render_edition",
]
