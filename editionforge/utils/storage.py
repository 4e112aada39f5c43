# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Build and Export Storage
All paths are resolved from Settings (cwd-relative by default).

Layout:
    build/
        images/
            1.png ...
        gifs/               (only when gif.export is on)
            1.gif ...
        json/
            _metadata.json  (input, never rewritten)
            1.json ...
    export/
        metadata.csv
        1.png ...
"""

import shutil
from pathlib import Path

from editionforge.config import Settings, get_settings
from editionforge.core.errors import (
    BuildDirectoryNotFoundError,
    ImagesDirectoryNotFoundError,
    MetadataNotFoundError,
)

METADATA_FILENAME = "_metadata.json"
EXPORT_CSV_FILENAME = "metadata.csv"


def _settings(settings: Settings | None) -> Settings:
    return settings or get_settings()


# ─── Build Directory Builders ────────────────────────────────────────────────

def build_dir(settings: Settings | None = None) -> Path:
    return _settings(settings).build_dir


def images_dir(settings: Settings | None = None) -> Path:
    return build_dir(settings) / "images"


def gifs_dir(settings: Settings | None = None) -> Path:
    return build_dir(settings) / "gifs"


def json_dir(settings: Settings | None = None) -> Path:
    return build_dir(settings) / "json"


def metadata_path(settings: Settings | None = None) -> Path:
    return json_dir(settings) / METADATA_FILENAME


# ─── Per-Edition Paths ───────────────────────────────────────────────────────

def edition_image_path(edition: int | str, settings: Settings | None = None) -> Path:
    return images_dir(settings) / f"{edition}.png"


def edition_gif_path(edition: int | str, settings: Settings | None = None) -> Path:
    return gifs_dir(settings) / f"{edition}.gif"


def edition_json_path(edition: int | str, settings: Settings | None = None) -> Path:
    return json_dir(settings) / f"{edition}.json"


# ─── Export Paths ────────────────────────────────────────────────────────────

def export_dir(settings: Settings | None = None) -> Path:
    return _settings(settings).export_dir


def export_csv_path(settings: Settings | None = None) -> Path:
    return export_dir(settings) / EXPORT_CSV_FILENAME


# ─── Lifecycle Helpers ───────────────────────────────────────────────────────

def _recreate(d: Path) -> None:
    if d.exists():
        shutil.rmtree(d)
    d.mkdir(parents=True)


def check_rebuild_preconditions(settings: Settings | None = None) -> None:
    """
    Fail fast before any destructive setup.
    Raises BuildDirectoryNotFoundError / MetadataNotFoundError.
    """
    if not build_dir(settings).is_dir():
        raise BuildDirectoryNotFoundError(
            f"Build folder is not found: {build_dir(settings)}"
        )
    if not metadata_path(settings).is_file():
        raise MetadataNotFoundError(
            f"{METADATA_FILENAME} is not found: {metadata_path(settings)}"
        )


def init_rebuild_dirs(settings: Settings | None = None) -> None:
    """
    Recreate images/ (and gifs/ when GIF export is enabled) empty.
    json/ is left alone: it holds the metadata being rebuilt.
    """
    settings = _settings(settings)
    _recreate(images_dir(settings))
    if settings.gif.export:
        _recreate(gifs_dir(settings))
    json_dir(settings).mkdir(parents=True, exist_ok=True)


def check_export_preconditions(settings: Settings | None = None) -> None:
    if not metadata_path(settings).is_file():
        raise MetadataNotFoundError(
            f"{METADATA_FILENAME} is not found: {metadata_path(settings)}"
        )
    if not images_dir(settings).is_dir():
        raise ImagesDirectoryNotFoundError(
            f"Images folder is not found: {images_dir(settings)}"
        )


def init_export_dir(settings: Settings | None = None) -> Path:
    """Remove any previous export and create it empty. Destructive."""
    d = export_dir(settings)
    _recreate(d)
    return d


def copy_images(source_dir: Path, output_dir: Path) -> list[Path]:
    """
    Copy every regular file of source_dir into output_dir, byte for byte.
    Returns the copied destination paths in file-name order.
    """
    copied: list[Path] = []
    for src in sorted(source_dir.iterdir()):
        if not src.is_file():
            continue
        dest = output_dir / src.name
        shutil.copyfile(src, dest)
        copied.append(dest)
    return copied
