# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Layer Data Models
Pydantic models for the layer catalog built from configuration and for
the per-record layer selections produced by re-resolution.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Element(BaseModel):
    """One selectable image inside a layer folder."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0, description="Index within the layer folder listing")
    name: str = Field(..., description="File stem without the rarity suffix")
    filename: str
    path: Path
    weight: int = Field(1, description="Rarity weight parsed from the file name")


class Layer(BaseModel):
    """
    A named visual channel and its selectable elements.
    Built once per run from configuration; never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0, description="Position in its configuration group")
    name: str = Field(..., description="Display name, or the folder name")
    blend: str = "source-over"
    opacity: float = Field(1.0, ge=0.0, le=1.0)
    bypass_dna: bool = False
    elements: tuple[Element, ...] = Field(default_factory=tuple)


class LayerInfo(BaseModel):
    """
    The layer chosen by one metadata attribute, with the element it names.
    selected_element is None when the attribute value matched no element.
    """
    name: str
    blend: str = "source-over"
    opacity: float = Field(1.0, ge=0.0, le=1.0)
    selected_element: Element | None = None
