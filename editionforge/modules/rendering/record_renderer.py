# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Record Renderer
Regenerates one edition from its metadata record:

  1. Re-resolve attributes to layers/elements
  2. Load every selected element image (off the event loop)
  3. Clear a private canvas, optionally draw the background
  4. Draw layers in attribute order, capturing a GIF frame after each
  5. Write images/<edition>.png, json/<edition>.json, gifs/<edition>.gif

Outcomes:
  SKIPPED  some attribute value matched no element (already warned by
           the resolver; nothing else is logged)
  FAILED   any other exception while loading, drawing or writing
  CREATED  all outputs written

LayerNotFoundError from re-resolution is not contained here: it means
the configuration and the metadata disagree, and the run must stop.
"""

from __future__ import annotations

import asyncio
import random
import traceback
from pathlib import Path

import numpy as np

from editionforge.config import Settings
from editionforge.models.layer import Layer, LayerInfo
from editionforge.models.metadata import MetadataRecord
from editionforge.models.result import RenderOutcome, Resolution
from editionforge.modules.rendering.background import draw_background
from editionforge.modules.rendering.canvas import Canvas
from editionforge.modules.rendering.gif_recorder import GifRecorder
from editionforge.modules.resolution.metadata_loader import write_record_json
from editionforge.modules.resolution.resolver import resolve_record
from editionforge.utils.image_utils import load_image_bgra, save_png
from editionforge.utils.logger import get_logger
from editionforge.utils.storage import (
    edition_gif_path,
    edition_image_path,
    edition_json_path,
)

log = get_logger(__name__)


def _element_path(info: LayerInfo) -> Path:
    if info.selected_element is None:
        raise ValueError(f"Layer {info.name!r} has no selected element")
    return info.selected_element.path


async def load_layer_images(layers: list[LayerInfo]) -> list[np.ndarray]:
    """Decode all selected element images concurrently, in layer order."""
    return list(
        await asyncio.gather(
            *(asyncio.to_thread(load_image_bgra, _element_path(info)) for info in layers)
        )
    )


async def _compose_and_save(
    record: MetadataRecord,
    resolution: Resolution,
    settings: Settings,
    rng: random.Random | None,
) -> None:
    images = await load_layer_images(resolution.layers)

    fmt = settings.format
    canvas = Canvas(fmt.width, fmt.height, smoothing=fmt.smoothing)
    canvas.clear()

    recorder: GifRecorder | None = None
    if settings.gif.export:
        recorder = GifRecorder(
            canvas,
            edition_gif_path(record.edition, settings),
            repeat=settings.gif.repeat,
            quality=settings.gif.quality,
            delay=settings.gif.delay,
        )
        recorder.start()

    if settings.background.generate:
        draw_background(canvas, settings.background, rng)

    for info, image in zip(resolution.layers, images):
        canvas.draw(image, blend=info.blend, opacity=info.opacity)
        if recorder is not None:
            recorder.add()

    if recorder is not None:
        await asyncio.to_thread(recorder.stop)

    await asyncio.to_thread(
        save_png, canvas.snapshot(), edition_image_path(record.edition, settings)
    )
    await asyncio.to_thread(
        write_record_json, record, edition_json_path(record.edition, settings)
    )


async def render_edition(
    record: MetadataRecord,
    catalog: list[Layer],
    settings: Settings,
    rng: random.Random | None = None,
) -> RenderOutcome:
    """
    Rebuild one edition. Never raises for per-record problems.

    Raises:
        LayerNotFoundError: a trait_type names no catalog layer.
    """
    resolution = resolve_record(record, catalog)
    if not resolution.is_resolved:
        return RenderOutcome.SKIPPED

    try:
        await _compose_and_save(record, resolution, settings, rng)
    except Exception as exc:
        log.error(
            "failed_edition",
            edition=record.edition,
            error=f"{type(exc).__name__}: {exc}",
            traceback=traceback.format_exc(),
        )
        return RenderOutcome.FAILED

    log.info("created_edition", edition=record.edition)
    return RenderOutcome.CREATED
