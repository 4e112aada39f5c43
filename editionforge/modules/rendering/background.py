# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Background Generator
Static backgrounds use background.default; generated ones pick a random
hue at the configured HSL brightness, so they differ between runs.
"""

from __future__ import annotations

import random

from PIL import ImageColor

from editionforge.config import BackgroundConfig
from editionforge.modules.rendering.canvas import Canvas


def background_css(cfg: BackgroundConfig, rng: random.Random | None = None) -> str:
    if cfg.static:
        return cfg.default
    hue = (rng or random.Random()).randrange(360)
    return f"hsl({hue}, 100%, {cfg.brightness})"


def background_color(
    cfg: BackgroundConfig, rng: random.Random | None = None
) -> tuple[int, int, int]:
    """Return the background as a BGR triple."""
    r, g, b = ImageColor.getrgb(background_css(cfg, rng))[:3]
    return b, g, r


def draw_background(
    canvas: Canvas, cfg: BackgroundConfig, rng: random.Random | None = None
) -> None:
    canvas.fill(background_color(cfg, rng))
