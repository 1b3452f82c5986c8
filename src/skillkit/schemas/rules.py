"""Pydantic models for validator rule files (``checks/rules/*.yml``)."""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Status(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"
    SKIP = "skip"


def _compile(pattern: str) -> str:
    try:
        re.compile(pattern, re.MULTILINE)
    except re.error as exc:
        raise ValueError(f"invalid regex {pattern!r}: {exc}") from exc
    return pattern


def _as_list(v: object) -> object:
    return [v] if isinstance(v, str) else v


class _CheckBase(BaseModel):
    """Fields shared by every check kind."""

    model_config = ConfigDict(extra="forbid")

    label: str
    # Paths (any-of) that must exist for the check to run at all
    when: list[str] = []
    hint: str = ""

    @field_validator("when", mode="before")
    @classmethod
    def when_list(cls, v: object) -> object:
        return _as_list(v)


class ExistsCheck(_CheckBase):
    """Pass when any of ``paths`` exists."""

    kind: Literal["exists"]
    paths: list[str]
    type: Literal["file", "dir", "any"] = "file"
    on_fail: Status = Status.FAIL

    @field_validator("paths", mode="before")
    @classmethod
    def paths_list(cls, v: object) -> object:
        return _as_list(v)


class ContainsCheck(_CheckBase):
    """Pass when any existing file in ``files`` matches ``pattern``.

    Entries in ``files`` may be plain paths or gitignore-style globs.
    """

    kind: Literal["contains"]
    files: list[str]
    pattern: str
    ignore_case: bool = False
    on_fail: Status = Status.FAIL
    on_missing: Status = Status.WARN

    @field_validator("pattern")
    @classmethod
    def check_regex(cls, v: str) -> str:
        return _compile(v)

    @field_validator("files", mode="before")
    @classmethod
    def files_list(cls, v: object) -> object:
        return _as_list(v)


class AbsentCheck(_CheckBase):
    """One ``on_fail`` result per file in ``files`` that matches ``pattern``."""

    kind: Literal["absent"]
    files: list[str]
    pattern: str
    ignore_case: bool = False
    on_fail: Status = Status.WARN

    @field_validator("pattern")
    @classmethod
    def check_regex(cls, v: str) -> str:
        return _compile(v)

    @field_validator("files", mode="before")
    @classmethod
    def files_list(cls, v: object) -> object:
        return _as_list(v)


class JsonCheck(_CheckBase):
    """Pass when ``path`` is a JSON object containing ``keys``."""

    kind: Literal["json"]
    path: str
    keys: list[str] = []
    on_fail: Status = Status.FAIL
    on_missing: Status = Status.SKIP


class CountCheck(_CheckBase):
    """Pass when at least ``min`` files match ``globs``."""

    kind: Literal["count"]
    globs: list[str]
    min: int = Field(default=1, ge=0)
    include_ignored: bool = False
    on_fail: Status = Status.WARN

    @field_validator("globs", mode="before")
    @classmethod
    def globs_list(cls, v: object) -> object:
        return _as_list(v)


class PerFileCheck(_CheckBase):
    """Flag each file matching ``globs`` that breaks a per-file rule.

    A file offends when ``pattern`` matches and ``unless`` does not, or
    when its basename does not match ``name_pattern``.
    """

    kind: Literal["per_file"]
    globs: list[str]
    pattern: str | None = None
    unless: str | None = None
    name_pattern: str | None = None
    on_fail: Status = Status.WARN

    @field_validator("globs", mode="before")
    @classmethod
    def globs_list(cls, v: object) -> object:
        return _as_list(v)

    @field_validator("pattern", "unless", "name_pattern")
    @classmethod
    def check_regex(cls, v: str | None) -> str | None:
        return _compile(v) if v is not None else v

    @model_validator(mode="after")
    def check_has_rule(self) -> "PerFileCheck":
        if self.pattern is None and self.name_pattern is None:
            raise ValueError(f"per_file check {self.label!r} needs pattern or name_pattern")
        return self


Check = Annotated[
    Union[ExistsCheck, ContainsCheck, AbsentCheck, JsonCheck, CountCheck, PerFileCheck],
    Field(discriminator="kind"),
]


class Section(BaseModel):
    title: str
    checks: list[Check] = []


class DetectRule(BaseModel):
    """Applicability test used by ``validate --all``."""

    model_config = ConfigDict(extra="forbid")

    paths: list[str] = []
    contains: dict[str, str] = {}

    @field_validator("contains")
    @classmethod
    def check_patterns(cls, v: dict[str, str]) -> dict[str, str]:
        for pattern in v.values():
            _compile(pattern)
        return v


class RuleSet(BaseModel):
    """A complete validator: metadata plus ordered sections of checks."""

    model_config = ConfigDict(extra="forbid")

    name: str
    title: str
    skill: str = ""
    description: str = ""
    # Any-of; when none exists the run stops with a single failure
    requires: list[str] = []
    requires_label: str = ""
    detect: DetectRule | None = None
    sections: list[Section]

    @field_validator("requires", mode="before")
    @classmethod
    def requires_list(cls, v: object) -> object:
        return _as_list(v)

    @property
    def check_count(self) -> int:
        return sum(len(s.checks) for s in self.sections)
