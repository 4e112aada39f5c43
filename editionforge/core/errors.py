# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Error Types
Startup and configuration failures terminate the run; they reach the
console script entry points, get logged, and are re-raised.
Per-record failures never use these types except UnsupportedBlendModeError,
which the record renderer contains like any other drawing error.

A missing element is not an error: the resolver reports it as an outcome.
"""

from __future__ import annotations


class BuildDirectoryNotFoundError(FileNotFoundError):
    """Raised when the build directory does not exist."""


class MetadataNotFoundError(FileNotFoundError):
    """Raised when build/json/_metadata.json does not exist."""


class ImagesDirectoryNotFoundError(FileNotFoundError):
    """Raised when the export step finds no generated images directory."""


class LayerSetupError(RuntimeError):
    """Raised when a configured layer folder cannot be read."""


class LayerNotFoundError(LookupError):
    """
    Raised when a metadata attribute names a trait_type that no configured
    layer carries. The layer configuration and the metadata disagree, so
    re-resolution cannot continue for any record.
    """

    def __init__(self, edition: object, trait_type: str) -> None:
        self.edition = edition
        self.trait_type = trait_type
        super().__init__(
            f"Edition {edition}: no layer named {trait_type!r} in the "
            "layer configuration."
        )


class UnsupportedBlendModeError(ValueError):
    """Raised when a layer's blend mode has no compositing implementation."""
