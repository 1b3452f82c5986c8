"""YAML config loader — reads skillkit.yml into SkillkitConfig."""

import logging
import os
from pathlib import Path

import yaml

from skillkit.schemas.config import SkillkitConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "skillkit.yml"

# Nested list fields that YAML may load as None when every item is commented out
_LIST_KEYS = {
    "lint": ("required_sections", "allowed_bond_types"),
    "validators": ("extra_paths", "disabled"),
    "generators": ("extra_paths",),
}


def load_config(path: str | Path) -> SkillkitConfig:
    """Load and validate a skillkit config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    for section, keys in _LIST_KEYS.items():
        block = raw.get(section)
        if block is None:
            raw.pop(section, None)
            continue
        if not isinstance(block, dict):
            continue
        for key in keys:
            if key in block:
                if block[key] is None:
                    block[key] = []
                elif isinstance(block[key], list):
                    block[key] = [item for item in block[key] if item]

    return SkillkitConfig(**raw)


def resolve_config(path: str | Path | None = None, *, search_dir: str | Path = ".") -> SkillkitConfig:
    """Return the effective config.

    An explicit ``path`` must exist. Without one, ``skillkit.yml`` in
    ``search_dir`` is used when present, otherwise defaults apply.
    ``SKILLKIT_PLUGIN_ROOT`` overrides ``plugin_root`` in either case.
    """
    if path is not None:
        cfg = load_config(path)
    else:
        candidate = Path(search_dir) / DEFAULT_CONFIG_NAME
        if candidate.exists():
            logger.debug("Using config file %s", candidate)
            cfg = load_config(candidate)
        else:
            cfg = SkillkitConfig()

    env_root = os.environ.get("SKILLKIT_PLUGIN_ROOT")
    if env_root:
        cfg = cfg.model_copy(update={"plugin_root": env_root})
    return cfg
