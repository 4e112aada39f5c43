# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Outcome Models
Explicit outcomes passed between re-resolution, the record renderer and
the batch driver, so an expected skip never travels as an exception.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from editionforge.models.layer import LayerInfo
from editionforge.models.metadata import Attribute


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    MISSING_ELEMENT = "missing_element"


class Resolution(BaseModel):
    """Re-resolution of one record: one LayerInfo per attribute, in order."""
    edition: int | str
    status: ResolutionStatus
    layers: list[LayerInfo] = Field(default_factory=list)
    missing: list[Attribute] = Field(
        default_factory=list,
        description="Attributes whose value matched no element",
    )

    @property
    def is_resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED


class RenderOutcome(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


class BatchSummary(BaseModel):
    """Totals reported once the whole collection has been processed."""
    total: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0
    chunks: int = 0
    failed_editions: list[int | str] = Field(default_factory=list)

    def record(self, edition: int | str, outcome: RenderOutcome) -> None:
        self.total += 1
        if outcome == RenderOutcome.CREATED:
            self.created += 1
        elif outcome == RenderOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
            self.failed_editions.append(edition)
