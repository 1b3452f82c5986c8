"""Discovery and loading of validator rule files."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from skillkit.errors import RuleSetError
from skillkit.schemas.rules import RuleSet

logger = logging.getLogger(__name__)

BUILTIN_RULES_DIR = Path(__file__).parent / "rules"


def _rule_files(directory: Path) -> dict[str, Path]:
    return {p.stem: p for p in sorted(directory.glob("*.yml"))}


def discover(extra_paths: list[str | Path] | None = None) -> dict[str, Path]:
    """Map validator name to rule file; later directories override earlier ones."""
    found = _rule_files(BUILTIN_RULES_DIR)
    for extra in extra_paths or []:
        extra = Path(extra)
        if extra.is_file():
            found[extra.stem] = extra
        elif extra.is_dir():
            found.update(_rule_files(extra))
        else:
            logger.warning("Validator path does not exist: %s", extra)
    return found


def load_rule_file(path: str | Path) -> RuleSet:
    """Parse and validate one rule file. Raises ``RuleSetError``."""
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise RuleSetError(f"{path.name}: invalid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise RuleSetError(f"{path.name}: rule file must be a YAML mapping")
    raw.setdefault("name", path.stem)
    try:
        return RuleSet(**raw)
    except ValidationError as exc:
        raise RuleSetError(f"{path.name}: {exc}") from exc


def available_validators(
    extra_paths: list[str | Path] | None = None,
    disabled: list[str] | None = None,
) -> list[str]:
    names = discover(extra_paths)
    return [n for n in names if n not in set(disabled or [])]


def load_validator(name: str, extra_paths: list[str | Path] | None = None) -> RuleSet:
    """Load a validator by name (built-in or from ``extra_paths``)."""
    files = discover(extra_paths)
    if name not in files:
        known = ", ".join(sorted(files))
        raise RuleSetError(f"Unknown validator {name!r}. Available: {known}")
    return load_rule_file(files[name])
