# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Metadata Record Models
One record per previously generated edition, as stored in
build/json/_metadata.json. Records are read-only input; the raw JSON
object is kept alongside the parsed fields so per-record copies can be
written back verbatim (extra keys such as dna/date/compiler, key order).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class Attribute(BaseModel):
    model_config = ConfigDict(extra="allow")

    trait_type: str
    value: bool | str | int | float

    @property
    def value_text(self) -> str:
        """The value as JSON writes it: booleans are true/false."""
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)


class MetadataRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    edition: int | str = Field(..., description="Unique identifier of the edition")
    name: str = ""
    description: str = ""
    image: str = ""
    attributes: list[Attribute] = Field(default_factory=list)

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "MetadataRecord":
        record = cls.model_validate(raw)
        record._raw = raw
        return record

    @property
    def raw(self) -> dict[str, Any]:
        """The stored JSON object; falls back to a dump for built records."""
        return self._raw or self.model_dump(mode="json")
