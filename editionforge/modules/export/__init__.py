# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Export Module
Public API for the marketplace CSV export.
"""

from editionforge.modules.export.csv_exporter import (
    BASE_COLUMNS,
    build_table,
    collect_trait_types,
    export_collection,
    image_reference,
    write_csv,
)

__all__ = [
    "BASE_COLUMNS",
    "collect_trait_types",
    "image_reference",
    "build_table",
    "write_csv",
    "export_collection",
]
