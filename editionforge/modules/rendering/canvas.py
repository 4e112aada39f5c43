# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Drawing Canvas
A BGRA surface that layers are composited onto, bottom to top.

Each record gets its own Canvas, so records rendered concurrently in one
chunk never draw over each other.

Compositing follows the W3C "Compositing and Blending" model. Mode names
are the canvas globalCompositeOperation names used in layer configuration.

Blend modes (separable and non-separable) mix colours, then composite
with source-over:

    Cs'  = (1 - ab)·Cs + ab·B(Cb, Cs)
    ao   = as + ab·(1 - as)
    Co   = (as·Cs' + ab·Cb·(1 - as)) / ao

Porter-Duff operators keep the source colour and weight each side by
its operator fractions Fa and Fb:

    ao   = as·Fa + ab·Fb
    Co   = (as·Fa·Cs + ab·Fb·Cb) / ao

as already includes the layer opacity. "lighter" sums both sides and
clamps alpha and colour to 1.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from editionforge.core.errors import UnsupportedBlendModeError
from editionforge.utils.image_utils import resize_to

BlendFn = Callable[[np.ndarray, np.ndarray], np.ndarray]
OperatorFn = Callable[[np.ndarray, np.ndarray], tuple]


# ─── Separable Blend Functions ───────────────────────────────────────────────
# cb = backdrop, cs = source; float32 arrays in [0, 1]

def _normal(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return cs


def _multiply(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return cb * cs


def _screen(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return cb + cs - cb * cs


def _hard_light(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return np.where(cs <= 0.5, _multiply(cb, 2.0 * cs), _screen(cb, 2.0 * cs - 1.0))


def _overlay(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return _hard_light(cs, cb)


def _darken(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return np.minimum(cb, cs)


def _lighten(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return np.maximum(cb, cs)


def _color_dodge(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        dodged = np.minimum(1.0, cb / (1.0 - cs))
    return np.where(cb == 0.0, 0.0, np.where(cs >= 1.0, 1.0, dodged))


def _color_burn(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        burned = 1.0 - np.minimum(1.0, (1.0 - cb) / cs)
    return np.where(cb >= 1.0, 1.0, np.where(cs <= 0.0, 0.0, burned))


def _soft_light(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    d = np.where(cb <= 0.25, ((16.0 * cb - 12.0) * cb + 4.0) * cb, np.sqrt(cb))
    return np.where(
        cs <= 0.5,
        cb - (1.0 - 2.0 * cs) * cb * (1.0 - cb),
        cb + (2.0 * cs - 1.0) * (d - cb),
    )


def _difference(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return np.abs(cb - cs)


def _exclusion(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return cb + cs - 2.0 * cb * cs


# ─── Non-Separable Blend Functions ───────────────────────────────────────────
# Channels are in BGR order, so the luma weights are reversed.

_LUMA_BGR = np.array([0.11, 0.59, 0.3], dtype=np.float32)


def _lum(c: np.ndarray) -> np.ndarray:
    return (c * _LUMA_BGR).sum(axis=2, keepdims=True)


def _clip_color(c: np.ndarray) -> np.ndarray:
    lum = _lum(c)
    lo = c.min(axis=2, keepdims=True)
    hi = c.max(axis=2, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        c = np.where(lo < 0.0, lum + (c - lum) * lum / (lum - lo), c)
        c = np.where(hi > 1.0, lum + (c - lum) * (1.0 - lum) / (hi - lum), c)
    return c


def _set_lum(c: np.ndarray, lum: np.ndarray) -> np.ndarray:
    return _clip_color(c + (lum - _lum(c)))


def _sat(c: np.ndarray) -> np.ndarray:
    return c.max(axis=2, keepdims=True) - c.min(axis=2, keepdims=True)


def _set_sat(c: np.ndarray, sat: np.ndarray) -> np.ndarray:
    # max channel → sat, min channel → 0, middle scaled between them
    lo = c.min(axis=2, keepdims=True)
    spread = c.max(axis=2, keepdims=True) - lo
    with np.errstate(divide="ignore", invalid="ignore"):
        scaled = (c - lo) * sat / spread
    return np.where(spread > 0.0, scaled, 0.0)


def _hue(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return _set_lum(_set_sat(cs, _sat(cb)), _lum(cb))


def _saturation(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return _set_lum(_set_sat(cb, _sat(cs)), _lum(cb))


def _color(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return _set_lum(cs, _lum(cb))


def _luminosity(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return _set_lum(cb, _lum(cs))


BLEND_MODES: dict[str, BlendFn] = {
    "source-over": _normal,
    "normal": _normal,
    "multiply": _multiply,
    "screen": _screen,
    "overlay": _overlay,
    "darken": _darken,
    "lighten": _lighten,
    "color-dodge": _color_dodge,
    "color-burn": _color_burn,
    "hard-light": _hard_light,
    "soft-light": _soft_light,
    "difference": _difference,
    "exclusion": _exclusion,
    "hue": _hue,
    "saturation": _saturation,
    "color": _color,
    "luminosity": _luminosity,
}


# ─── Porter-Duff Operators ───────────────────────────────────────────────────
# (as, ab) → (Fa, Fb)

COMPOSITE_OPERATORS: dict[str, OperatorFn] = {
    "source-in": lambda a_s, a_b: (a_b, 0.0),
    "source-out": lambda a_s, a_b: (1.0 - a_b, 0.0),
    "source-atop": lambda a_s, a_b: (a_b, 1.0 - a_s),
    "destination-over": lambda a_s, a_b: (1.0 - a_b, 1.0),
    "destination-in": lambda a_s, a_b: (0.0, a_s),
    "destination-out": lambda a_s, a_b: (0.0, 1.0 - a_s),
    "destination-atop": lambda a_s, a_b: (1.0 - a_b, a_s),
    "lighter": lambda a_s, a_b: (1.0, 1.0),
    "copy": lambda a_s, a_b: (1.0, 0.0),
    "xor": lambda a_s, a_b: (1.0 - a_b, 1.0 - a_s),
}


def supported_operations() -> list[str]:
    return sorted([*BLEND_MODES, *COMPOSITE_OPERATORS])


def _to_u8(x: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(x * 255.0), 0, 255).astype(np.uint8)


class Canvas:
    """
    BGRA uint8 drawing surface of a fixed size.
    Layers larger or smaller than the canvas are scaled to fill it.
    """

    def __init__(self, width: int, height: int, smoothing: bool = False) -> None:
        self.width = width
        self.height = height
        self.smoothing = smoothing
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    def clear(self) -> None:
        """Reset to fully transparent black."""
        self.pixels[:] = 0

    def fill(self, color_bgr: tuple[int, int, int]) -> None:
        """Paint the whole surface with an opaque colour."""
        self.pixels[:, :, :3] = color_bgr
        self.pixels[:, :, 3] = 255

    def draw(
        self,
        image: np.ndarray,
        blend: str = "source-over",
        opacity: float = 1.0,
    ) -> None:
        """
        Composite a BGRA image onto the canvas with a blend mode or a
        Porter-Duff operator.

        Raises:
            UnsupportedBlendModeError: blend names neither.
        """
        name = blend.lower()
        operator = COMPOSITE_OPERATORS.get(name)
        blend_fn = BLEND_MODES.get(name)
        if operator is None and blend_fn is None:
            raise UnsupportedBlendModeError(
                f"Unsupported blend mode {blend!r}; expected one of "
                f"{', '.join(supported_operations())}"
            )

        src = resize_to(image, self.width, self.height, self.smoothing).astype(np.float32) / 255.0
        dst = self.pixels.astype(np.float32) / 255.0

        cs, a_s = src[:, :, :3], src[:, :, 3:4] * float(opacity)
        cb, a_b = dst[:, :, :3], dst[:, :, 3:4]

        if operator is not None:
            f_a, f_b = operator(a_s, a_b)
            mixed = cs
        else:
            f_a, f_b = 1.0, 1.0 - a_s
            mixed = (1.0 - a_b) * cs + a_b * np.clip(blend_fn(cb, cs), 0.0, 1.0)

        c_o = a_s * f_a * mixed + a_b * f_b * cb
        a_o = np.minimum(a_s * f_a + a_b * f_b, 1.0)
        with np.errstate(divide="ignore", invalid="ignore"):
            color = np.where(a_o > 0.0, c_o / a_o, 0.0)

        self.pixels = np.concatenate([_to_u8(color), _to_u8(a_o)], axis=2)

    def snapshot(self) -> np.ndarray:
        return self.pixels.copy()
