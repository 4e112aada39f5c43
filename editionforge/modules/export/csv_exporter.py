# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Marketplace CSV Exporter
Flattens the metadata collection into one CSV row per edition.

Columns:
  name, description, image, <trait_type_1>, <trait_type_2>, ...

Trait columns are every distinct trait_type, in order of first
appearance across the collection. The image column holds "./<basename>"
so the CSV resolves images copied next to it. Traits a record lacks are
empty strings. If a record repeats a trait_type, its last value wins.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

import pandas as pd

from editionforge.models.metadata import MetadataRecord
from editionforge.utils.logger import get_logger
from editionforge.utils.storage import EXPORT_CSV_FILENAME, copy_images

log = get_logger(__name__)

BASE_COLUMNS: list[str] = ["name", "description", "image"]


def collect_trait_types(records: list[MetadataRecord]) -> list[str]:
    trait_types: list[str] = []
    seen: set[str] = set()
    for record in records:
        for attr in record.attributes:
            if attr.trait_type not in seen:
                seen.add(attr.trait_type)
                trait_types.append(attr.trait_type)
    return trait_types


def image_reference(image: str) -> str:
    """'ipfs://Qm.../12.png' → './12.png'"""
    return f"./{PurePosixPath(image).name}"


def build_table(records: list[MetadataRecord]) -> pd.DataFrame:
    """
    Build the export table. Trait columns are addressed by position, so a
    trait named like a base column ("name") still lands in its own column.
    """
    trait_types = collect_trait_types(records)
    header = BASE_COLUMNS + trait_types
    column_of = {t: len(BASE_COLUMNS) + i for i, t in enumerate(trait_types)}

    rows: list[list[str]] = []
    for record in records:
        row = [""] * len(header)
        row[0] = record.name
        row[1] = record.description
        row[2] = image_reference(record.image)
        for attr in record.attributes:
            row[column_of[attr.trait_type]] = attr.value_text
        rows.append(row)

    return pd.DataFrame(rows, columns=header, dtype=object)


def write_csv(table: pd.DataFrame, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False, lineterminator="\n", encoding="utf-8")
    return path


def export_collection(
    records: list[MetadataRecord],
    images_dir: Path,
    output_dir: Path,
    csv_path: Path | None = None,
) -> Path:
    """
    Copy generated images into output_dir and write the CSV beside them.
    output_dir must already exist (see storage.init_export_dir).
    csv_path defaults to output_dir/metadata.csv.

    Returns:
        Path of the written CSV.
    """
    copied = copy_images(images_dir, output_dir)
    log.info("images_copied", count=len(copied), dest=str(output_dir))

    table = build_table(records)
    csv_path = write_csv(table, csv_path or output_dir / EXPORT_CSV_FILENAME)
    log.info(
        "csv_written",
        path=str(csv_path),
        rows=len(table),
        trait_columns=len(table.columns) - len(BASE_COLUMNS),
    )
    return csv_path
