# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Metadata Collection I/O
Reads the stored _metadata.json array and writes per-edition copies.
"""

from __future__ import annotations

import json
from pathlib import Path

from editionforge.core.errors import MetadataNotFoundError
from editionforge.models.metadata import MetadataRecord
from editionforge.utils.logger import get_logger

log = get_logger(__name__)


def load_metadata_collection(path: Path) -> list[MetadataRecord]:
    """
    Parse the metadata array in file order.
    Raises MetadataNotFoundError if the file is missing and ValueError
    if it does not hold a JSON array.
    """
    if not path.is_file():
        raise MetadataNotFoundError(f"Metadata file not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path.name} must contain a JSON array of records")

    records = [MetadataRecord.from_raw(item) for item in data]
    log.info("metadata_loaded", path=str(path), records=len(records))
    return records


def write_record_json(record: MetadataRecord, path: Path) -> None:
    """Write the record exactly as stored, indented by two spaces."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(record.raw, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
