# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Layer Catalog Builder
Merges the layers of every configuration group into one catalog.

A layer shared by several groups (the usual case for "Background") is
kept once, from the group where it first appears. Names compare exactly;
"Hat" and "hat" are different layers here even though re-resolution
later matches trait types case-insensitively.
"""

from __future__ import annotations

from pathlib import Path

from editionforge.config import LayerConfiguration, Settings, get_settings
from editionforge.models.layer import Layer
from editionforge.modules.catalog.layer_setup import layers_setup
from editionforge.utils.logger import get_logger

log = get_logger(__name__)


def merge_layers(groups: list[list[Layer]]) -> list[Layer]:
    """Deduplicate layers by exact name, preserving first appearance."""
    seen: set[str] = set()
    catalog: list[Layer] = []
    for layers in groups:
        for layer in layers:
            if layer.name in seen:
                continue
            seen.add(layer.name)
            catalog.append(layer)
    return catalog


def build_layer_catalog(
    configurations: list[LayerConfiguration],
    layers_dir: Path,
    delimiter: str = "#",
) -> list[Layer]:
    """
    Run layer setup for every configuration group and merge the results.

    Args:
        configurations: Ordered configuration groups
        layers_dir:     Root folder holding one sub-folder per layer
        delimiter:      Rarity delimiter used in element file names

    Returns:
        Deduplicated Layer list in order of first appearance.
    """
    catalog = merge_layers(
        [layers_setup(cfg.layers_order, layers_dir, delimiter) for cfg in configurations]
    )
    log.info(
        "layer_catalog_built",
        groups=len(configurations),
        layers=len(catalog),
        elements=sum(len(layer.elements) for layer in catalog),
    )
    return catalog


def catalog_from_settings(settings: Settings | None = None) -> list[Layer]:
    settings = settings or get_settings()
    return build_layer_catalog(
        settings.layer_configurations,
        settings.layers_dir,
        settings.rarity_delimiter,
    )
