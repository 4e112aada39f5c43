# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Pipeline Orchestrator
Wires the modules of each procedure in dependency order.

Rebuild:
  1. Preconditions (build dir, _metadata.json), checked before anything is deleted
  2. Recreate images/ (and gifs/)
  3. Layer catalog from configuration
  4. Load metadata collection
  5. Chunked batch render

Export:
  1. Preconditions (_metadata.json, images/)
  2. Recreate export/
  3. Copy images + write metadata.csv
"""

from __future__ import annotations

import random
import traceback
from pathlib import Path

from editionforge.config import Settings, get_settings
from editionforge.models.result import BatchSummary
from editionforge.modules.batch.driver import rebuild_editions
from editionforge.modules.catalog.catalog_builder import catalog_from_settings
from editionforge.modules.export.csv_exporter import export_collection
from editionforge.modules.resolution.metadata_loader import load_metadata_collection
from editionforge.utils.logger import get_logger
from editionforge.utils.storage import (
    check_export_preconditions,
    check_rebuild_preconditions,
    export_csv_path,
    images_dir,
    init_export_dir,
    init_rebuild_dirs,
    metadata_path,
)

log = get_logger(__name__)


async def run_rebuild(
    settings: Settings | None = None,
    rng: random.Random | None = None,
) -> BatchSummary:
    """
    Rebuild every edition of the collection.
    Startup and configuration errors propagate to the caller.
    """
    settings = settings or get_settings()

    if settings.background_is_random:
        log.warning(
            "background_not_static",
            advice=(
                "The background is set to generate a random colour, so "
                "rebuilt images may differ from the originals."
            ),
        )

    check_rebuild_preconditions(settings)
    init_rebuild_dirs(settings)

    log.info("stage_start", stage="catalog")
    catalog = catalog_from_settings(settings)
    log.info("stage_complete", stage="catalog", layers=len(catalog))

    records = load_metadata_collection(metadata_path(settings))

    log.info("stage_start", stage="render", records=len(records))
    summary = await rebuild_editions(records, catalog, settings, rng)
    log.info("stage_complete", stage="render")
    return summary


def run_export(settings: Settings | None = None) -> Path:
    """
    Export the collection for marketplace upload.
    Returns the written CSV path.
    """
    settings = settings or get_settings()

    check_export_preconditions(settings)
    out_dir = init_export_dir(settings)

    records = load_metadata_collection(metadata_path(settings))
    csv_path = export_collection(
        records, images_dir(settings), out_dir, csv_path=export_csv_path(settings)
    )

    log.info("export_finished", path=str(csv_path), records=len(records))
    return csv_path


def log_fatal(event: str, exc: BaseException) -> None:
    log.error(
        event,
        error=f"{type(exc).__name__}: {exc}",
        traceback=traceback.format_exc(),
    )
