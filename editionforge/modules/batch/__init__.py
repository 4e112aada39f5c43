# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Batch Module
Public API for the chunked collection rebuild.
"""

from editionforge.modules.batch.chunking import chunked
from editionforge.modules.batch.driver import rebuild_editions

__all__ = [
    "chunked",
    "rebuild_editions",
]
