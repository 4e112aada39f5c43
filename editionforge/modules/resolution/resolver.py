# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Metadata Re-resolver
Maps a stored record's attributes back onto catalog layers and elements.

  trait_type → Layer.name     case-insensitive; no match raises LayerNotFoundError
  value      → Element.name   case-insensitive; no match is logged and reported
                               as a MISSING_ELEMENT outcome

One LayerInfo is produced per attribute, in attribute order, even when
some of them have no selected element.
"""

from __future__ import annotations

from editionforge.core.errors import LayerNotFoundError
from editionforge.models.layer import Element, Layer, LayerInfo
from editionforge.models.metadata import Attribute, MetadataRecord
from editionforge.models.result import Resolution, ResolutionStatus
from editionforge.utils.logger import get_logger

log = get_logger(__name__)


def find_layer(catalog: list[Layer], trait_type: str) -> Layer | None:
    key = trait_type.lower()
    return next((layer for layer in catalog if layer.name.lower() == key), None)


def find_element(layer: Layer, value: str) -> Element | None:
    key = value.lower()
    return next((e for e in layer.elements if e.name.lower() == key), None)


def resolve_record(record: MetadataRecord, catalog: list[Layer]) -> Resolution:
    """
    Re-resolve one metadata record against the layer catalog.

    Raises:
        LayerNotFoundError: an attribute's trait_type names no catalog layer.

    Returns:
        Resolution with status RESOLVED when every attribute found its
        element, MISSING_ELEMENT otherwise.
    """
    infos: list[LayerInfo] = []
    missing: list[Attribute] = []

    for attr in record.attributes:
        layer = find_layer(catalog, attr.trait_type)
        if layer is None:
            raise LayerNotFoundError(record.edition, attr.trait_type)

        element = find_element(layer, attr.value_text)
        if element is None:
            log.warning(
                "missing_element",
                edition=record.edition,
                trait_type=attr.trait_type,
                value=attr.value_text,
            )
            missing.append(attr)

        infos.append(
            LayerInfo(
                name=layer.name,
                blend=layer.blend,
                opacity=layer.opacity,
                selected_element=element,
            )
        )

    return Resolution(
        edition=record.edition,
        status=ResolutionStatus.MISSING_ELEMENT if missing else ResolutionStatus.RESOLVED,
        layers=infos,
        missing=missing,
    )
