"""Scaffold rendering — turns a generator definition into files on disk.

Templates use ``[[ ]]`` / ``[% %]`` / ``[# #]`` delimiters so that the
``{{ }}`` found in JSX, Vue templates and CSS passes through untouched.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)
from pydantic import BaseModel

from skillkit.errors import GeneratorError
from skillkit.generators.registry import GeneratorSpec

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9 _-]*$")
_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


# ------------------------------------------------------------------
# Case filters
# ------------------------------------------------------------------

def words(value: str) -> list[str]:
    """Split ``userProfile``, ``user-profile`` or ``USER_PROFILE`` into words."""
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value)
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", value)
    return [w for w in re.split(r"[^A-Za-z0-9]+", value) if w]


def pascal(value: str) -> str:
    return "".join(w[:1].upper() + w[1:].lower() for w in words(value))


def camel(value: str) -> str:
    p = pascal(value)
    return p[:1].lower() + p[1:]


def kebab(value: str) -> str:
    return "-".join(w.lower() for w in words(value))


def snake(value: str) -> str:
    return "_".join(w.lower() for w in words(value))


def upper_snake(value: str) -> str:
    return snake(value).upper()


def hook(value: str) -> str:
    """Hook or composable name: ``user-profile`` -> ``useUserProfile``."""
    name = camel(value)
    if re.match(r"^use[A-Z0-9]", name):
        return name
    return "use" + pascal(value)


FILTERS = {
    "pascal": pascal,
    "camel": camel,
    "kebab": kebab,
    "snake": snake,
    "upper_snake": upper_snake,
    "hook": hook,
}


def make_environment(template_dir: str | Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(enabled_extensions=()),
        undefined=StrictUndefined,
        variable_start_string="[[",
        variable_end_string="]]",
        block_start_string="[%",
        block_end_string="%]",
        comment_start_string="[#",
        comment_end_string="#]",
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters.update(FILTERS)
    return env


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

def coerce_option(value: Any) -> Any:
    """Turn ``--set flag=false`` style strings into booleans."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return value


def parse_assignments(pairs: list[str]) -> dict[str, str]:
    """Parse ``key=value`` strings from the command line."""
    options: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise GeneratorError(f"Expected key=value, got {pair!r}")
        options[key.strip()] = value
    return options


def _safe_path(generator: str, path: str) -> str:
    rel = PurePosixPath(path.strip())
    if not rel.parts or rel.is_absolute() or ".." in rel.parts:
        raise GeneratorError(f"{generator}: refusing to write outside the output directory: {path!r}")
    return rel.as_posix()


def render(
    generator: GeneratorSpec,
    name: str | None = None,
    variant: str | None = None,
    options: dict[str, Any] | None = None,
) -> dict[str, str]:
    """Render every file of ``generator``; returns relative path -> content."""
    if variant is None:
        variant = generator.default_variant
    elif variant not in generator.variants:
        allowed = ", ".join(generator.variants) or "none"
        raise GeneratorError(f"{generator.name}: unknown variant {variant!r} (allowed: {allowed})")

    name = name or generator.default_name
    if not name:
        raise GeneratorError(f"{generator.name}: a name is required (--name)")
    if not _NAME_RE.match(name):
        raise GeneratorError(f"{generator.name}: invalid name {name!r}")

    options = {k: coerce_option(v) for k, v in (options or {}).items()}
    for key in options:
        if key not in generator.defaults:
            logger.warning("Option %r is not declared by generator %s", key, generator.name)

    context = {
        **generator.defaults,
        **options,
        "name": name,
        "variant": variant,
        "generator": generator.name,
    }
    env = make_environment(generator.directory)

    files: dict[str, str] = {}
    for entry in generator.files:
        try:
            if entry.when and not env.compile_expression(entry.when)(**context):
                continue
            path = _safe_path(generator.name, env.from_string(entry.path).render(context))
            files[path] = env.get_template(entry.template).render(context)
        except TemplateError as exc:
            raise GeneratorError(f"{generator.name}/{entry.template}: {exc.message}") from exc
    logger.debug("Rendered %d file(s) for %s", len(files), generator.name)
    return files


class WriteResult(BaseModel):
    written: list[str] = []
    skipped: list[str] = []


def write(files: dict[str, str], output_dir: str | Path, *, force: bool = False) -> WriteResult:
    """Write rendered files below ``output_dir``.

    Existing files are left alone unless ``force`` is set.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    result = WriteResult()
    for rel_path, content in files.items():
        dest = output_dir / rel_path
        if dest.exists() and not force:
            logger.debug("Skipping existing file: %s", rel_path)
            result.skipped.append(rel_path)
            continue
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding="utf-8")
        logger.debug("Scaffolded: %s", rel_path)
        result.written.append(rel_path)
    return result
