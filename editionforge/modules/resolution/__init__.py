# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Resolution Module
Public API for reading stored metadata and re-resolving it to layers.
"""

from editionforge.modules.resolution.metadata_loader import (
    load_metadata_collection,
    write_record_json,
)
from editionforge.modules.resolution.resolver import (
    find_element,
    find_layer,
    resolve_record,
)

__all__ = [
    # Metadata I/O
    "load_metadata_collection",
    "write_record_json",
    # Resolver
    "find_layer",
    "find_element",
    "resolve_record",
]
