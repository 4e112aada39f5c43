# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Catalog Module
Public API for building the layer catalog from configuration.
"""

from editionforge.modules.catalog.catalog_builder import (
    build_layer_catalog,
    catalog_from_settings,
    merge_layers,
)
from editionforge.modules.catalog.layer_setup import (
    clean_name,
    get_elements,
    layers_setup,
    rarity_weight,
)

__all__ = [
    # Layer setup
    "clean_name",
    "rarity_weight",
    "get_elements",
    "layers_setup",
    # Catalog builder
    "merge_layers",
    "build_layer_catalog",
    "catalog_from_settings",
]
