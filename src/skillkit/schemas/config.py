"""Configuration schema — validates skillkit.yml."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from skillkit.schemas.documents import BondType


class LintSettings(BaseModel):
    """Knobs for the corpus linter."""

    # Headings every SKILL.md must contain, matched case-insensitively
    # against the heading text (e.g. "Quick Start").
    required_sections: list[str] = []
    allowed_bond_types: list[BondType] = list(BondType)
    # Treat warnings as failures
    strict: bool = False


class ValidatorSettings(BaseModel):
    """Where to find validator rule files and which to skip."""

    extra_paths: list[str] = []
    disabled: list[str] = []


class GeneratorSettings(BaseModel):
    """Extra generator directories and per-generator option defaults."""

    extra_paths: list[str] = []
    # e.g. {"component": {"variant": "memo"}}
    defaults: dict[str, dict[str, Any]] = {}


class SkillkitConfig(BaseModel):
    """Top-level configuration loaded from skillkit.yml.

    Every field has a default so a missing config file is equivalent to
    an empty one.
    """

    plugin_root: str = "."
    # Default OUTPUT_DIR for `generate`
    output_directory: str = "."

    lint: LintSettings = LintSettings()
    validators: ValidatorSettings = ValidatorSettings()
    generators: GeneratorSettings = GeneratorSettings()

    @field_validator("plugin_root", "output_directory")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @model_validator(mode="after")
    def check_extra_paths_exist(self) -> "SkillkitConfig":
        for p in self.validators.extra_paths + self.generators.extra_paths:
            if not Path(p).exists():
                raise ValueError(f"extra path does not exist: {p}")
        return self
