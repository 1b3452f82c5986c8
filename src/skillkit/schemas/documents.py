"""Pydantic models for skill and agent front matter."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_KEBAB_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_VERSION_RE = re.compile(r"^\d+(?:\.\d+){0,2}$")


class BondType(str, Enum):
    """How strongly a skill is tied to its bonded agent."""

    PRIMARY = "PRIMARY_BOND"
    SECONDARY = "SECONDARY_BOND"
    SUPPORT = "SUPPORT_BOND"


class RetryLogic(BaseModel):
    """Retry policy an orchestrator should apply when invoking the skill."""

    model_config = ConfigDict(extra="allow")

    enabled: bool = True
    max_attempts: int = Field(default=3, ge=1)
    backoff: Literal["exponential", "linear", "fixed"] = "exponential"
    initial_delay_ms: int = Field(default=1000, ge=0)


class LoggingPolicy(BaseModel):
    """Logging hooks an orchestrator should emit for the skill."""

    model_config = ConfigDict(extra="allow")

    level: Literal["debug", "info", "warning", "error"] = "info"
    hooks: list[str] = []

    @field_validator("level", mode="before")
    @classmethod
    def lowercase_level(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v


def _coerce_version(v: object) -> object:
    # YAML reads `sasmp_version: 1.10` as the float 1.1
    if isinstance(v, float):
        raise ValueError(f"sasmp_version {v!r} was read as a number; quote it, e.g. \"1.3.0\"")
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


def _check_version(v: str | None) -> str | None:
    if v is not None and not _VERSION_RE.match(v):
        raise ValueError(f"sasmp_version must look like 1.2.3, got {v!r}")
    return v


def _split_csv(v: object) -> object:
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    if v is None:
        return []
    return v


class SkillFrontMatter(BaseModel):
    """Front matter of a ``SKILL.md`` document.

    Unknown keys are preserved: the metadata is consumed by an external
    orchestrator and may carry fields this tool does not know about.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    description: str
    sasmp_version: str | None = None
    bonded_agent: str | None = None
    bond_type: BondType | None = None
    validation: dict[str, Any] = {}
    retry_logic: RetryLogic | None = None
    logging: LoggingPolicy | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not _KEBAB_RE.match(v):
            raise ValueError(f"name must be kebab-case, got {v!r}")
        return v

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description must not be empty")
        return v.strip()

    @field_validator("sasmp_version", mode="before")
    @classmethod
    def coerce_version(cls, v: object) -> object:
        return _coerce_version(v)

    @field_validator("sasmp_version")
    @classmethod
    def check_version(cls, v: str | None) -> str | None:
        return _check_version(v)

    @field_validator("validation", mode="before")
    @classmethod
    def null_validation(cls, v: object) -> object:
        return {} if v is None else v

    @model_validator(mode="after")
    def check_bond(self) -> "SkillFrontMatter":
        if self.bond_type is not None and not self.bonded_agent:
            raise ValueError("bond_type is set but bonded_agent is missing")
        return self


class AgentFrontMatter(BaseModel):
    """Front matter of an agent document (``agents/*.md``)."""

    model_config = ConfigDict(extra="allow")

    name: str
    description: str
    model: str | None = None
    tools: list[str] = []
    skills: list[str] = []
    sasmp_version: str | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not _KEBAB_RE.match(v):
            raise ValueError(f"name must be kebab-case, got {v!r}")
        return v

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description must not be empty")
        return v.strip()

    @field_validator("tools", "skills", mode="before")
    @classmethod
    def split_lists(cls, v: object) -> object:
        return _split_csv(v)

    @field_validator("sasmp_version", mode="before")
    @classmethod
    def coerce_version(cls, v: object) -> object:
        return _coerce_version(v)

    @field_validator("sasmp_version")
    @classmethod
    def check_version(cls, v: str | None) -> str | None:
        return _check_version(v)


class Heading(BaseModel):
    level: int
    text: str


class SkillDocument(BaseModel):
    """A parsed ``skills/<dir>/SKILL.md`` file."""

    path: Path
    directory: str
    meta: SkillFrontMatter
    raw: dict[str, Any] = {}
    body: str = ""
    headings: list[Heading] = []

    @property
    def name(self) -> str:
        return self.meta.name


class AgentDocument(BaseModel):
    """A parsed ``agents/*.md`` file."""

    path: Path
    meta: AgentFrontMatter
    raw: dict[str, Any] = {}
    body: str = ""
    headings: list[Heading] = []

    @property
    def name(self) -> str:
        return self.meta.name


class CommandDocument(BaseModel):
    """A slash-command document (``commands/*.md``); front matter is optional."""

    path: Path
    name: str
    description: str = ""
    body: str = ""
