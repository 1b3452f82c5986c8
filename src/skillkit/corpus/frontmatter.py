"""Front-matter splitting and heading extraction for markdown documents."""

from __future__ import annotations

import re
from typing import Any

import yaml

from skillkit.errors import FrontMatterError

_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into its YAML front matter and body.

    The document must open with a ``---`` line. The block ends at the next
    ``---`` or ``...`` line. Raises ``FrontMatterError`` for a missing or
    unterminated block, invalid YAML, or a block that is not a mapping.
    """
    text = text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != "---":
        raise FrontMatterError("document does not start with a '---' front-matter block")

    for i, line in enumerate(lines[1:], start=1):
        if line.strip() in ("---", "..."):
            block = "".join(lines[1:i])
            body = "".join(lines[i + 1:])
            break
    else:
        raise FrontMatterError("front-matter block is not closed with '---'")

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        where = f" (line {mark.line + 2})" if mark is not None else ""
        raise FrontMatterError(f"invalid YAML in front matter{where}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(f"front matter must be a mapping, got {type(data).__name__}")
    return data, body


def extract_headings(body: str) -> list[tuple[int, str]]:
    """Return ``(level, text)`` for every ATX heading outside fenced code."""
    headings: list[tuple[int, str]] = []
    in_fence = False
    for line in body.splitlines():
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        m = _HEADING_RE.match(line)
        if m:
            headings.append((len(m.group(1)), m.group(2).strip()))
    return headings


def count_fences(body: str) -> int:
    """Number of fence delimiter lines (``` or ~~~) in the body."""
    return sum(1 for line in body.splitlines() if _FENCE_RE.match(line))
