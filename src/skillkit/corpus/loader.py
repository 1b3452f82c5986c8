"""Plugin corpus discovery — parses every skill, agent and command document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ValidationError

from skillkit.corpus.frontmatter import extract_headings, split_front_matter
from skillkit.errors import FrontMatterError
from skillkit.schemas.documents import (
    AgentDocument,
    AgentFrontMatter,
    CommandDocument,
    Heading,
    SkillDocument,
    SkillFrontMatter,
)
from skillkit.shared.project_tree import ProjectTree

logger = logging.getLogger(__name__)

SKILL_GLOB = "skills/*/SKILL.md"
AGENT_GLOB = "agents/*.md"
COMMAND_GLOB = "commands/*.md"


class LoadError(BaseModel):
    """A document that could not be turned into a model."""

    path: str
    code: Literal["front-matter", "schema"]
    message: str


def _field_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages


class PluginCorpus:
    """All documents of one plugin root.

    Use ``PluginCorpus.load(root)``. Broken documents never abort loading;
    they are collected in ``errors`` so every problem can be reported in
    one pass.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.tree = ProjectTree(root)
        self._skills: list[SkillDocument] = []
        self._agents: list[AgentDocument] = []
        self._commands: list[CommandDocument] = []
        self._errors: list[LoadError] = []

    @classmethod
    def load(cls, root: str | Path) -> "PluginCorpus":
        corpus = cls(Path(root))
        for rel in corpus.tree.glob(SKILL_GLOB):
            corpus._load_skill(rel)
        for rel in corpus.tree.glob(AGENT_GLOB):
            corpus._load_agent(rel)
        for rel in corpus.tree.glob(COMMAND_GLOB):
            corpus._load_command(rel)
        logger.info(
            "Loaded %d skills, %d agents, %d commands from %s (%d errors)",
            len(corpus._skills), len(corpus._agents), len(corpus._commands),
            corpus.tree.root, len(corpus._errors),
        )
        return corpus

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _split(self, rel: str) -> tuple[dict, str] | None:
        text = self.tree.read_text(rel)
        if text is None:
            self._errors.append(LoadError(path=rel, code="front-matter", message="file could not be read"))
            return None
        try:
            return split_front_matter(text)
        except FrontMatterError as exc:
            self._errors.append(LoadError(path=rel, code="front-matter", message=str(exc)))
            return None

    def _schema_errors(self, rel: str, exc: ValidationError) -> None:
        for message in _field_errors(exc):
            self._errors.append(LoadError(path=rel, code="schema", message=message))

    def _load_skill(self, rel: str) -> None:
        parsed = self._split(rel)
        if parsed is None:
            return
        raw, body = parsed
        try:
            meta = SkillFrontMatter(**raw)
        except ValidationError as exc:
            self._schema_errors(rel, exc)
            return
        self._skills.append(
            SkillDocument(
                path=self.tree.root / rel,
                directory=Path(rel).parent.name,
                meta=meta,
                raw=raw,
                body=body,
                headings=[Heading(level=lvl, text=txt) for lvl, txt in extract_headings(body)],
            )
        )

    def _load_agent(self, rel: str) -> None:
        parsed = self._split(rel)
        if parsed is None:
            return
        raw, body = parsed
        try:
            meta = AgentFrontMatter(**raw)
        except ValidationError as exc:
            self._schema_errors(rel, exc)
            return
        self._agents.append(
            AgentDocument(
                path=self.tree.root / rel,
                meta=meta,
                raw=raw,
                body=body,
                headings=[Heading(level=lvl, text=txt) for lvl, txt in extract_headings(body)],
            )
        )

    def _load_command(self, rel: str) -> None:
        text = self.tree.read_text(rel) or ""
        name = Path(rel).stem
        # Front matter is optional for commands
        try:
            raw, body = split_front_matter(text)
        except FrontMatterError:
            raw, body = {}, text
        self._commands.append(
            CommandDocument(
                path=self.tree.root / rel,
                name=str(raw.get("name") or name),
                description=str(raw.get("description") or ""),
                body=body,
            )
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def skills(self) -> list[SkillDocument]:
        return list(self._skills)

    @property
    def agents(self) -> list[AgentDocument]:
        return list(self._agents)

    @property
    def commands(self) -> list[CommandDocument]:
        return list(self._commands)

    @property
    def errors(self) -> list[LoadError]:
        return list(self._errors)

    def skill(self, name: str) -> SkillDocument | None:
        return next((s for s in self._skills if s.name == name), None)

    def agent(self, name: str) -> AgentDocument | None:
        return next((a for a in self._agents if a.name == name), None)

    def relpath(self, path: Path) -> str:
        return path.relative_to(self.tree.root).as_posix()

    def scripts_for(self, skill: SkillDocument) -> list[str]:
        """Files under the skill's ``scripts/`` directory, relative to the skill dir."""
        prefix = f"skills/{skill.directory}/"
        return [rel.removeprefix(prefix) for rel in self.tree.glob(f"{prefix}scripts/**")]
