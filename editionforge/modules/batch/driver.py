# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Batch Render Driver
Rebuilds the whole collection in fixed-size chunks.

Scheduling:
  - records are split into contiguous chunks of settings.concurrency
  - all records of a chunk render concurrently on the event loop
  - the next chunk starts only after every record of the current one
    has finished, so at most `concurrency` records are in flight and
    chunk N+1 never overtakes chunk N
  - completion order inside a chunk is unspecified

Per-record failures are contained by render_edition. A LayerNotFoundError
is fatal: the chunk it occurred in is allowed to finish and its finished
records are counted. The partial totals are logged as rebuild_aborted,
then the error is re-raised and no further chunk starts.
"""

from __future__ import annotations

import asyncio
import random

import structlog

from editionforge.config import Settings
from editionforge.models.layer import Layer
from editionforge.models.metadata import MetadataRecord
from editionforge.models.result import BatchSummary
from editionforge.modules.batch.chunking import chunked
from editionforge.modules.rendering.record_renderer import render_edition
from editionforge.utils.logger import get_logger

log = get_logger(__name__)


async def rebuild_editions(
    records: list[MetadataRecord],
    catalog: list[Layer],
    settings: Settings,
    rng: random.Random | None = None,
) -> BatchSummary:
    """
    Render every record, chunk by chunk.

    Args:
        records:  Metadata records in collection order
        catalog:  Layer catalog from the catalog builder
        settings: Run settings (concurrency, format, background, gif, paths)
        rng:      Random source for generated backgrounds

    Returns:
        BatchSummary with created / skipped / failed counts.
    """
    chunks = chunked(records, settings.concurrency)
    summary = BatchSummary(chunks=len(chunks))

    for index, chunk in enumerate(chunks):
        structlog.contextvars.bind_contextvars(chunk=index)
        try:
            results = await asyncio.gather(
                *(render_edition(r, catalog, settings, rng) for r in chunk),
                return_exceptions=True,
            )
        finally:
            structlog.contextvars.unbind_contextvars("chunk")

        fatal: BaseException | None = None
        for record, result in zip(chunk, results):
            if isinstance(result, BaseException):
                fatal = fatal or result
            else:
                summary.record(record.edition, result)

        if fatal is not None:
            _log_summary(summary, aborted_at_chunk=index)
            raise fatal

        log.debug("chunk_complete", chunk=index, size=len(chunk))

    _log_summary(summary)
    return summary


def _log_summary(summary: BatchSummary, aborted_at_chunk: int | None = None) -> None:
    fields = dict(
        total=summary.total,
        created=summary.created,
        skipped=summary.skipped,
        failed=summary.failed,
        chunks=summary.chunks,
    )
    if aborted_at_chunk is None:
        log.info("rebuild_complete", **fields)
    else:
        log.error("rebuild_aborted", aborted_at_chunk=aborted_at_chunk, **fields)
