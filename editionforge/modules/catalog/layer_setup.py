# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Layer Setup
Turns one configuration group's layers_order into Layer objects by
listing each layer folder under layers_dir.

Element file names follow the generator convention:
    "<Element name><delimiter><rarity weight>.<ext>"   e.g. "Red Hat#20.png"
The weight is optional; non-numeric or absent weights count as 1.
"""

from __future__ import annotations

from pathlib import Path

from editionforge.config import LayerOrderEntry
from editionforge.core.errors import LayerSetupError
from editionforge.models.layer import Element, Layer


def clean_name(filename: str, delimiter: str = "#") -> str:
    """Element name: file stem up to the first rarity delimiter."""
    return Path(filename).stem.split(delimiter)[0]


def rarity_weight(filename: str, delimiter: str = "#") -> int:
    tail = Path(filename).stem.split(delimiter)[-1]
    try:
        return int(tail)
    except ValueError:
        return 1


def get_elements(layer_path: Path, delimiter: str = "#") -> list[Element]:
    """
    List a layer folder as Elements, sorted by file name.
    Hidden files (".DS_Store" etc.) are ignored.
    Raises LayerSetupError if the folder does not exist.
    """
    if not layer_path.is_dir():
        raise LayerSetupError(f"Layer folder not found: {layer_path}")

    files = sorted(
        p for p in layer_path.iterdir()
        if p.is_file() and not p.name.startswith(".")
    )
    return [
        Element(
            id=index,
            name=clean_name(p.name, delimiter),
            filename=p.name,
            path=p,
            weight=rarity_weight(p.name, delimiter),
        )
        for index, p in enumerate(files)
    ]


def layers_setup(
    layers_order: list[LayerOrderEntry],
    layers_dir: Path,
    delimiter: str = "#",
) -> list[Layer]:
    """Build the ordered Layer list for one configuration group."""
    layers: list[Layer] = []
    for index, entry in enumerate(layers_order):
        opts = entry.options
        layers.append(
            Layer(
                id=index,
                name=opts.display_name if opts.display_name is not None else entry.name,
                blend=opts.blend,
                opacity=opts.opacity,
                bypass_dna=opts.bypass_dna,
                elements=tuple(get_elements(layers_dir / entry.name, delimiter)),
            )
        )
    return layers
