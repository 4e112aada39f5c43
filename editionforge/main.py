# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Console Script Entry Points
    editionforge-rebuild   regenerate build/images (and gifs) from build/json/_metadata.json
    editionforge-export    write export/metadata.csv and copy build/images

Both take no arguments; paths are cwd-relative unless configured.
Fatal errors are logged and re-raised, so the process exits non-zero.
"""

from __future__ import annotations

import asyncio

from editionforge.config import get_settings
from editionforge.core.pipeline import log_fatal, run_export, run_rebuild
from editionforge.utils.logger import configure_logging, get_logger

log = get_logger(__name__)

VERSION = "1.0.0"


def rebuild() -> None:
    settings = get_settings()
    configure_logging(settings)

    log.info(
        "editionforge_startup",
        version=VERSION,
        procedure="rebuild",
        build_dir=str(settings.build_dir),
        layers_dir=str(settings.layers_dir),
        concurrency=settings.concurrency,
        gif_export=settings.gif.export,
    )

    try:
        asyncio.run(run_rebuild(settings))
    except Exception as exc:
        log_fatal("rebuild_fatal_error", exc)
        raise


def export() -> None:
    settings = get_settings()
    configure_logging(settings)

    log.info(
        "editionforge_startup",
        version=VERSION,
        procedure="export",
        build_dir=str(settings.build_dir),
        export_dir=str(settings.export_dir),
    )

    try:
        run_export(settings)
    except Exception as exc:
        log_fatal("export_fatal_error", exc)
        raise


if __name__ == "__main__":
    rebuild()
