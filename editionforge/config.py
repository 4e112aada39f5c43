# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Application Configuration
Settings are loaded from init kwargs, EDITIONFORGE_* environment variables,
.env, and an optional editionforge.json in the working directory.
Nested sections accept the camelCase keys of the generator's config file
(displayName, layersOrder, growEditionSizeTo, ...).
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class FormatConfig(BaseModel):
    width: int = Field(512, gt=0)
    height: int = Field(512, gt=0)
    # False → nearest-neighbour scaling (pixel art)
    smoothing: bool = False


class BackgroundConfig(BaseModel):
    generate: bool = True
    brightness: str = "80%"
    static: bool = False
    default: str = "#000000"


class LayerOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(None, alias="displayName")
    blend: str = "source-over"
    opacity: float = Field(1.0, ge=0.0, le=1.0)
    bypass_dna: bool = Field(False, alias="bypassDNA")


class LayerOrderEntry(BaseModel):
    """One layer folder in a configuration group, bottom to top."""
    name: str
    options: LayerOptions = Field(default_factory=LayerOptions)


class LayerConfiguration(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    grow_edition_size_to: int | None = Field(None, alias="growEditionSizeTo")
    layers_order: list[LayerOrderEntry] = Field(
        default_factory=list, alias="layersOrder"
    )


class GifConfig(BaseModel):
    export: bool = False
    # -1 = play once, 0 = loop forever, n = loop n times
    repeat: int = Field(0, ge=-1)
    quality: int = Field(100, ge=1)
    delay: int = Field(500, ge=0, description="Per-frame duration in ms")


def _default_layer_configurations() -> list[LayerConfiguration]:
    names = [
        "Background",
        "Eyeball",
        "Eye color",
        "Iris",
        "Shine",
        "Bottom lid",
        "Top lid",
    ]
    return [
        LayerConfiguration(
            grow_edition_size_to=5,
            layers_order=[LayerOrderEntry(name=n) for n in names],
        )
    ]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EDITIONFORGE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        json_file="editionforge.json",
        json_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Directories ─────────────────────────────────────────────────────────
    build_dir: Path = Path("./build")
    layers_dir: Path = Path("./layers")
    export_dir: Path = Path("./export")

    # ─── Batch Rendering ─────────────────────────────────────────────────────
    # Records rendered together per chunk; the next chunk waits for this one
    concurrency: int = Field(10, ge=1)
    rarity_delimiter: str = Field("#", min_length=1)

    # ─── Composition ─────────────────────────────────────────────────────────
    format: FormatConfig = Field(default_factory=FormatConfig)
    background: BackgroundConfig = Field(default_factory=BackgroundConfig)
    layer_configurations: list[LayerConfiguration] = Field(
        default_factory=_default_layer_configurations
    )
    gif: GifConfig = Field(default_factory=GifConfig)

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # ─── Derived helpers ─────────────────────────────────────────────────────
    @property
    def background_is_random(self) -> bool:
        return self.background.generate and not self.background.static


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
