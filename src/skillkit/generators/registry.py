"""Generator discovery — each generator is a directory holding ``generator.yml``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from skillkit.errors import GeneratorError

logger = logging.getLogger(__name__)

BUILTIN_GENERATORS_DIR = Path(__file__).parent / "templates"
MANIFEST_NAME = "generator.yml"


class GeneratorFile(BaseModel):
    """One output file: a template and the (templated) path it renders to."""

    model_config = ConfigDict(extra="forbid")

    template: str
    path: str
    # Jinja expression over the render context; the file is skipped when falsy
    when: str | None = None


class GeneratorSpec(BaseModel):
    """Parsed ``generator.yml``."""

    model_config = ConfigDict(extra="forbid")

    name: str
    skill: str = ""
    description: str = ""
    variants: list[str] = []
    default_variant: str | None = None
    # Used when the caller passes no --name; None means a name is required
    default_name: str | None = None
    defaults: dict[str, Any] = {}
    files: list[GeneratorFile]
    directory: Path = Path(".")

    @model_validator(mode="after")
    def check_variants(self) -> "GeneratorSpec":
        if self.variants and self.default_variant is None:
            self.default_variant = self.variants[0]
        if self.default_variant is not None and self.default_variant not in self.variants:
            raise ValueError(f"default_variant {self.default_variant!r} is not one of {self.variants}")
        return self


def _generator_dirs(base: Path) -> dict[str, Path]:
    return {p.parent.name: p.parent for p in sorted(base.glob(f"*/{MANIFEST_NAME}"))}


def discover(extra_paths: list[str | Path] | None = None) -> dict[str, Path]:
    """Map generator name to its directory; extra paths override built-ins."""
    found = _generator_dirs(BUILTIN_GENERATORS_DIR)
    for extra in extra_paths or []:
        extra = Path(extra)
        if (extra / MANIFEST_NAME).is_file():
            found[extra.name] = extra
        elif extra.is_dir():
            found.update(_generator_dirs(extra))
        else:
            logger.warning("Generator path does not exist: %s", extra)
    return found


def load_generator_dir(directory: str | Path) -> GeneratorSpec:
    directory = Path(directory)
    manifest = directory / MANIFEST_NAME
    try:
        raw = yaml.safe_load(manifest.read_text())
    except yaml.YAMLError as exc:
        raise GeneratorError(f"{manifest}: invalid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise GeneratorError(f"{manifest}: must be a YAML mapping")
    raw.setdefault("name", directory.name)
    raw["directory"] = directory
    try:
        spec = GeneratorSpec(**raw)
    except ValidationError as exc:
        raise GeneratorError(f"{manifest}: {exc}") from exc
    for f in spec.files:
        if not (directory / f.template).is_file():
            raise GeneratorError(f"{spec.name}: template not found: {f.template}")
    return spec


def available_generators(extra_paths: list[str | Path] | None = None) -> list[str]:
    return list(discover(extra_paths))


def load_generator(name: str, extra_paths: list[str | Path] | None = None) -> GeneratorSpec:
    """Load a generator by name. Raises ``GeneratorError`` for unknown names."""
    dirs = discover(extra_paths)
    if name not in dirs:
        known = ", ".join(sorted(dirs))
        raise GeneratorError(f"Unknown generator {name!r}. Available: {known}")
    return load_generator_dir(dirs[name])
