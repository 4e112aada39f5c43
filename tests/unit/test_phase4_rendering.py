# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 4 — Rendering tests.
Pure OpenCV / numpy / Pillow on tiny canvases in temp directories.
"""

import asyncio
import json
import random
import tempfile
from pathlib import Path

import cv2
import numpy as np
import pytest
from PIL import Image, ImageColor
from structlog.testing import capture_logs


# ─── Helpers ─────────────────────────────────────────────────────────────────

BLUE = (255, 0, 0, 255)     # BGRA
RED = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)


def _solid(bgra, size=8) -> np.ndarray:
    img = np.zeros((size, size, 4), dtype=np.uint8)
    img[:] = bgra
    return img


def _write_png(path: Path, img: np.ndarray) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(path), img)
    return path


def _corner_patch(bgra, size=8, patch=4) -> np.ndarray:
    """Opaque colour in the top-left patch×patch square, transparent elsewhere."""
    img = np.zeros((size, size, 4), dtype=np.uint8)
    img[:patch, :patch] = bgra
    return img


def _setup(root: Path, **overrides):
    """Layers Background (Blue, Green) + Hat (Red corner), 8×8 canvas."""
    from editionforge.config import Settings
    from editionforge.modules.catalog import catalog_from_settings

    layers = root / "layers"
    _write_png(layers / "Background" / "Blue#10.png", _solid(BLUE))
    _write_png(layers / "Background" / "Green#5.png", _solid(GREEN))
    _write_png(layers / "Hat" / "Red.png", _corner_patch(RED))

    params = dict(
        _env_file=None,
        build_dir=root / "build",
        layers_dir=layers,
        format={"width": 8, "height": 8},
        background={"generate": False},
        layer_configurations=[{"layersOrder": [{"name": "Background"}, {"name": "Hat"}]}],
    )
    params.update(overrides)
    settings = Settings(**params)
    return settings, catalog_from_settings(settings)


def _record(edition, *attrs):
    from editionforge.models.metadata import MetadataRecord

    return MetadataRecord.from_raw({
        "name": f"Test #{edition}",
        "description": "rebuild test",
        "image": f"ipfs://cid/{edition}.png",
        "edition": edition,
        "attributes": [{"trait_type": t, "value": v} for t, v in attrs],
    })


# ─── Canvas ──────────────────────────────────────────────────────────────────

def test_canvas_starts_transparent():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(6, 4)
    assert canvas.pixels.shape == (4, 6, 4)
    assert canvas.pixels.max() == 0


def test_source_over_on_empty_canvas_copies_source():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.draw(_solid(RED))
    np.testing.assert_array_equal(canvas.pixels, _solid(RED))


def test_transparent_pixels_keep_backdrop():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.draw(_solid(BLUE))
    canvas.draw(_corner_patch(RED))

    assert tuple(canvas.pixels[0, 0]) == RED
    assert tuple(canvas.pixels[7, 7]) == BLUE


def test_layer_opacity_mixes_with_backdrop():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((0, 0, 0))
    canvas.draw(_solid((255, 255, 255, 255)), opacity=0.5)

    px = canvas.pixels[3, 3].astype(int)
    assert np.all(np.abs(px[:3] - 128) <= 1)
    assert px[3] == 255


def test_multiply_blend():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((200, 100, 50))
    canvas.draw(_solid((128, 128, 128, 255)), blend="multiply")

    px = canvas.pixels[0, 0].astype(int)
    expected = np.rint(np.array([200, 100, 50]) * 128 / 255).astype(int)
    assert np.all(np.abs(px[:3] - expected) <= 1)


def test_screen_blend_lightens():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((100, 100, 100))
    canvas.draw(_solid((100, 100, 100, 255)), blend="screen")

    assert canvas.pixels[0, 0, 0] > 100


def test_blend_on_transparent_backdrop_is_plain_source():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.draw(_solid(GREEN), blend="difference")
    np.testing.assert_array_equal(canvas.pixels, _solid(GREEN))


def test_unsupported_blend_mode_raises():
    from editionforge.core.errors import UnsupportedBlendModeError
    from editionforge.modules.rendering import Canvas

    with pytest.raises(UnsupportedBlendModeError, match="vivid-light"):
        Canvas(8, 8).draw(_solid(RED), blend="vivid-light")


def test_every_registered_blend_mode_draws():
    from editionforge.modules.rendering import BLEND_MODES, Canvas

    for mode in BLEND_MODES:
        canvas = Canvas(8, 8)
        canvas.fill((30, 120, 220))
        canvas.draw(_solid((200, 60, 10, 200)), blend=mode, opacity=0.9)
        assert canvas.pixels.dtype == np.uint8
        assert canvas.pixels[0, 0, 3] == 255


def test_every_composite_operator_draws():
    from editionforge.modules.rendering import COMPOSITE_OPERATORS, Canvas

    assert len(COMPOSITE_OPERATORS) == 10
    for op in COMPOSITE_OPERATORS:
        canvas = Canvas(8, 8)
        canvas.draw(_corner_patch(BLUE))
        canvas.draw(_solid((200, 60, 10, 200)), blend=op, opacity=0.9)
        assert canvas.pixels.dtype == np.uint8
        assert canvas.pixels.shape == (8, 8, 4)


def _backdrop_corner_then(op: str, source: np.ndarray):
    """Blue top-left patch on a transparent canvas, then source drawn with op."""
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.draw(_corner_patch(BLUE))
    canvas.draw(source, blend=op)
    return canvas.pixels


def test_destination_over_draws_behind_backdrop():
    px = _backdrop_corner_then("destination-over", _solid(RED))
    assert tuple(px[0, 0]) == BLUE
    assert tuple(px[7, 7]) == RED


def test_source_in_keeps_source_inside_backdrop_only():
    px = _backdrop_corner_then("source-in", _solid(RED))
    assert tuple(px[0, 0]) == RED
    assert px[7, 7, 3] == 0


def test_source_out_keeps_source_outside_backdrop_only():
    px = _backdrop_corner_then("source-out", _solid(RED))
    assert px[0, 0, 3] == 0
    assert tuple(px[7, 7]) == RED


def test_source_atop_paints_over_backdrop_only():
    px = _backdrop_corner_then("source-atop", _solid(RED))
    assert tuple(px[0, 0]) == RED
    assert px[7, 7, 3] == 0


def test_destination_in_and_out_mask_the_backdrop():
    kept = _backdrop_corner_then("destination-in", _corner_patch(RED, patch=2))
    assert tuple(kept[0, 0]) == BLUE
    assert kept[3, 3, 3] == 0

    erased = _backdrop_corner_then("destination-out", _corner_patch(RED, patch=2))
    assert erased[0, 0, 3] == 0
    assert tuple(erased[3, 3]) == BLUE


def test_destination_atop_keeps_backdrop_over_source():
    px = _backdrop_corner_then("destination-atop", _solid(RED))
    assert tuple(px[0, 0]) == BLUE
    assert tuple(px[7, 7]) == RED


def test_copy_replaces_backdrop():
    px = _backdrop_corner_then("copy", _corner_patch(RED, patch=2))
    assert tuple(px[0, 0]) == RED
    assert px[3, 3, 3] == 0


def test_xor_clears_the_overlap():
    px = _backdrop_corner_then("xor", _solid(RED))
    assert px[0, 0, 3] == 0
    assert tuple(px[7, 7]) == RED


def test_lighter_adds_and_clamps():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((100, 100, 100))
    canvas.draw(_solid((100, 50, 200, 255)), blend="lighter")

    px = canvas.pixels[0, 0].astype(int)
    assert abs(px[0] - 200) <= 1
    assert abs(px[1] - 150) <= 1
    assert px[2] == 255
    assert px[3] == 255


def _luma(bgr) -> float:
    b, g, r = (int(v) for v in bgr[:3])
    return 0.3 * r + 0.59 * g + 0.11 * b


def test_luminosity_takes_source_luma_and_backdrop_hue():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((0, 0, 255))
    canvas.draw(_solid((128, 128, 128, 255)), blend="luminosity")

    b, g, r, a = (int(v) for v in canvas.pixels[0, 0])
    assert abs(_luma((b, g, r)) - 128) <= 2
    assert r > g and abs(g - b) <= 1
    assert a == 255


def test_color_takes_source_hue_and_backdrop_luma():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((128, 128, 128))
    canvas.draw(_solid(RED), blend="color")

    b, g, r, _ = (int(v) for v in canvas.pixels[0, 0])
    assert abs(_luma((b, g, r)) - 128) <= 2
    assert r > g and abs(g - b) <= 1


def test_hue_on_grey_backdrop_keeps_backdrop():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((90, 90, 90))
    canvas.draw(_solid(GREEN), blend="hue")

    assert np.all(np.abs(canvas.pixels[0, 0, :3].astype(int) - 90) <= 1)


def test_saturation_from_grey_source_desaturates_backdrop():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.fill((0, 0, 255))
    canvas.draw(_solid((40, 40, 40, 255)), blend="saturation")

    # Grey at the luma of pure red: 0.3 × 255
    assert np.all(np.abs(canvas.pixels[0, 0, :3].astype(int) - 77) <= 1)


def test_smaller_layer_is_scaled_to_canvas():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8, smoothing=False)
    canvas.draw(_corner_patch(RED, size=4, patch=2))

    # Top-left quarter of the scaled image is red, the rest transparent
    assert tuple(canvas.pixels[3, 3]) == RED
    assert canvas.pixels[6, 6, 3] == 0


def test_clear_resets_canvas():
    from editionforge.modules.rendering import Canvas

    canvas = Canvas(8, 8)
    canvas.draw(_solid(RED))
    canvas.clear()
    assert canvas.pixels.max() == 0


# ─── Background ──────────────────────────────────────────────────────────────

def test_static_background_uses_default_colour():
    from editionforge.config import BackgroundConfig
    from editionforge.modules.rendering import Canvas, draw_background

    canvas = Canvas(4, 4)
    draw_background(canvas, BackgroundConfig(static=True, default="#112233"))

    assert tuple(canvas.pixels[0, 0]) == (0x33, 0x22, 0x11, 255)


def test_generated_background_uses_hsl_brightness():
    from editionforge.config import BackgroundConfig
    from editionforge.modules.rendering import background_color, background_css

    cfg = BackgroundConfig(brightness="80%")
    css = background_css(cfg, random.Random(7))
    hue = random.Random(7).randrange(360)

    assert css == f"hsl({hue}, 100%, 80%)"
    r, g, b = ImageColor.getrgb(css)[:3]
    assert background_color(cfg, random.Random(7)) == (b, g, r)


# ─── GIF Recorder ────────────────────────────────────────────────────────────

def test_gif_recorder_writes_one_frame_per_add():
    from editionforge.modules.rendering import Canvas, GifRecorder

    with tempfile.TemporaryDirectory() as tmp:
        canvas = Canvas(8, 8)
        path = Path(tmp) / "gifs" / "1.gif"
        recorder = GifRecorder(canvas, path, repeat=0, quality=10, delay=100)
        recorder.start()
        for color in (BLUE, GREEN, RED):
            canvas.draw(_solid(color))
            recorder.add()
        assert recorder.frame_count == 3

        recorder.stop()

        with Image.open(path) as gif:
            assert gif.format == "GIF"
            assert gif.n_frames == 3
            assert gif.info.get("duration") == 100


def test_gif_recorder_without_frames_writes_current_canvas():
    from editionforge.modules.rendering import Canvas, GifRecorder

    with tempfile.TemporaryDirectory() as tmp:
        canvas = Canvas(8, 8)
        canvas.fill((0, 0, 255))
        recorder = GifRecorder(canvas, Path(tmp) / "empty.gif", repeat=-1)
        recorder.start()
        recorder.stop()

        with Image.open(Path(tmp) / "empty.gif") as gif:
            assert gif.n_frames == 1
            r, g, b = gif.convert("RGB").getpixel((0, 0))
            assert r > 200 and g < 50 and b < 50


def test_gif_recorder_add_before_start_raises():
    from editionforge.modules.rendering import Canvas, GifRecorder

    recorder = GifRecorder(Canvas(4, 4), Path("unused.gif"))
    with pytest.raises(RuntimeError):
        recorder.add()


# ─── Record Renderer ─────────────────────────────────────────────────────────

def test_render_edition_creates_image_and_json():
    from editionforge.models.result import RenderOutcome
    from editionforge.modules.rendering import render_edition
    from editionforge.utils.storage import edition_image_path, edition_json_path

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(Path(tmp))
        record = _record(1, ("Background", "Blue"), ("Hat", "Red"))

        with capture_logs() as logs:
            outcome = asyncio.run(render_edition(record, catalog, settings))

        assert outcome == RenderOutcome.CREATED
        img = cv2.imread(str(edition_image_path(1, settings)), cv2.IMREAD_UNCHANGED)
        assert img.shape == (8, 8, 4)
        assert tuple(img[0, 0]) == RED
        assert tuple(img[7, 7]) == BLUE

        stored = json.loads(edition_json_path(1, settings).read_text())
        assert stored == record.raw

    assert {"event": "created_edition", "edition": 1, "log_level": "info"} in logs


def test_render_edition_draws_in_attribute_order():
    from editionforge.modules.rendering import render_edition
    from editionforge.utils.storage import edition_image_path

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(Path(tmp))
        # Hat first, Background second: background covers the hat
        record = _record(2, ("Hat", "Red"), ("Background", "Green"))
        asyncio.run(render_edition(record, catalog, settings))

        img = cv2.imread(str(edition_image_path(2, settings)), cv2.IMREAD_UNCHANGED)
        assert tuple(img[0, 0]) == GREEN


def test_render_edition_with_static_background():
    from editionforge.modules.rendering import render_edition
    from editionforge.utils.storage import edition_image_path

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(
            Path(tmp), background={"generate": True, "static": True, "default": "#00ff00"}
        )
        asyncio.run(render_edition(_record(3, ("Hat", "Red")), catalog, settings))

        img = cv2.imread(str(edition_image_path(3, settings)), cv2.IMREAD_UNCHANGED)
        assert tuple(img[0, 0]) == RED
        assert tuple(img[7, 7]) == GREEN


def test_render_edition_skips_missing_element_silently():
    from editionforge.models.result import RenderOutcome
    from editionforge.modules.rendering import render_edition
    from editionforge.utils.storage import edition_image_path, edition_json_path

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(Path(tmp))
        record = _record(5, ("Background", "Purple"), ("Hat", "Red"))

        with capture_logs() as logs:
            outcome = asyncio.run(render_edition(record, catalog, settings))

        assert outcome == RenderOutcome.SKIPPED
        assert not edition_image_path(5, settings).exists()
        assert not edition_json_path(5, settings).exists()

    events = [e["event"] for e in logs]
    assert events == ["missing_element"]


def test_render_edition_contains_unexpected_failure():
    from editionforge.models.result import RenderOutcome
    from editionforge.modules.rendering import render_edition
    from editionforge.utils.storage import edition_image_path

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(Path(tmp))
        # Corrupt the element file after the catalog was built
        catalog[1].elements[0].path.write_bytes(b"not a png")

        with capture_logs() as logs:
            outcome = asyncio.run(
                render_edition(_record(6, ("Hat", "Red")), catalog, settings)
            )

        assert outcome == RenderOutcome.FAILED
        assert not edition_image_path(6, settings).exists()

    failures = [e for e in logs if e["event"] == "failed_edition"]
    assert len(failures) == 1
    assert failures[0]["edition"] == 6
    assert failures[0]["log_level"] == "error"
    assert "ValueError" in failures[0]["error"]
    assert "traceback" in failures[0]


def test_render_edition_bad_blend_mode_is_a_record_failure():
    from editionforge.models.result import RenderOutcome
    from editionforge.modules.rendering import render_edition

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(
            Path(tmp),
            layer_configurations=[{"layersOrder": [
                {"name": "Background", "options": {"blend": "vivid-light"}},
            ]}],
        )
        outcome = asyncio.run(
            render_edition(_record(7, ("Background", "Blue")), catalog, settings)
        )

    assert outcome == RenderOutcome.FAILED


def test_render_edition_with_operator_and_non_separable_layers():
    from editionforge.models.result import RenderOutcome
    from editionforge.modules.rendering import render_edition
    from editionforge.utils.storage import edition_image_path

    for edition, mode in enumerate(
        ["destination-over", "lighter", "source-atop", "hue", "luminosity"], start=10
    ):
        with tempfile.TemporaryDirectory() as tmp:
            settings, catalog = _setup(
                Path(tmp),
                layer_configurations=[{"layersOrder": [
                    {"name": "Background"},
                    {"name": "Hat", "options": {"blend": mode}},
                ]}],
            )
            record = _record(edition, ("Background", "Blue"), ("Hat", "Red"))
            outcome = asyncio.run(render_edition(record, catalog, settings))

            assert outcome == RenderOutcome.CREATED, mode
            assert edition_image_path(edition, settings).exists()


def test_render_edition_unknown_layer_propagates():
    from editionforge.core.errors import LayerNotFoundError
    from editionforge.modules.rendering import render_edition

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(Path(tmp))
        with pytest.raises(LayerNotFoundError):
            asyncio.run(render_edition(_record(8, ("Cape", "Red")), catalog, settings))


def test_render_edition_exports_gif_frames():
    from editionforge.modules.rendering import render_edition
    from editionforge.utils.storage import edition_gif_path

    with tempfile.TemporaryDirectory() as tmp:
        settings, catalog = _setup(Path(tmp), gif={"export": True, "delay": 80})
        asyncio.run(
            render_edition(_record(9, ("Background", "Blue"), ("Hat", "Red")), catalog, settings)
        )

        path = edition_gif_path(9, settings)
        assert path.exists()
        with Image.open(path) as gif:
            assert gif.n_frames == 2
