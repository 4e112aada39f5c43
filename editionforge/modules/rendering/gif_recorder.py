# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — GIF Recorder
Captures the canvas after each layer is drawn and writes the captures as
an animated GIF, so the animation shows the edition being built up.

Bound to a single Canvas; one recorder per record.

Options (gif section of Settings):
  repeat   -1 plays once, 0 loops forever, n loops n times
  quality  ≤ 10 quantizes with median cut, otherwise fast octree
  delay    per-frame duration in milliseconds
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from editionforge.modules.rendering.canvas import Canvas
from editionforge.utils.image_utils import bgra_to_pil

_FINE_QUALITY_MAX = 10


class GifRecorder:
    def __init__(
        self,
        canvas: Canvas,
        path: Path,
        repeat: int = 0,
        quality: int = 100,
        delay: int = 500,
    ) -> None:
        self.canvas = canvas
        self.path = path
        self.repeat = repeat
        self.quality = quality
        self.delay = delay
        self._frames: list[Image.Image] | None = None

    @property
    def frame_count(self) -> int:
        return len(self._frames or [])

    def start(self) -> None:
        self._frames = []

    def add(self) -> None:
        """Capture the canvas as it is now."""
        if self._frames is None:
            raise RuntimeError("GifRecorder.add() called before start()")
        self._frames.append(self._capture())

    def stop(self) -> Path:
        """
        Encode and write the captured frames. A recorder that captured
        nothing writes a single frame of the current canvas.
        """
        if self._frames is None:
            raise RuntimeError("GifRecorder.stop() called before start()")

        frames = self._frames or [self._capture()]
        method = (
            Image.Quantize.MEDIANCUT
            if self.quality <= _FINE_QUALITY_MAX
            else Image.Quantize.FASTOCTREE
        )
        paletted = [f.quantize(colors=256, method=method) for f in frames]

        save_kwargs: dict = {
            "format": "GIF",
            "save_all": True,
            "append_images": paletted[1:],
            "duration": self.delay,
        }
        if self.repeat >= 0:
            save_kwargs["loop"] = self.repeat

        self.path.parent.mkdir(parents=True, exist_ok=True)
        paletted[0].save(self.path, **save_kwargs)
        self._frames = None
        return self.path

    def _capture(self) -> Image.Image:
        return bgra_to_pil(self.canvas.pixels).convert("RGB")
