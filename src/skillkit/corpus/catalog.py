"""Catalog export and plugin summary."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from skillkit.corpus.loader import PluginCorpus

logger = logging.getLogger(__name__)

MANIFEST_PATH = ".claude-plugin/plugin.json"


class CatalogSkill(BaseModel):
    name: str
    directory: str
    description: str
    bond_type: str | None = None
    sasmp_version: str | None = None
    scripts: list[str] = []


class CatalogAgent(BaseModel):
    name: str
    description: str
    model: str | None = None
    tools: list[str] = []
    skills: list[CatalogSkill] = []


class Catalog(BaseModel):
    """Agents with their bonded skills, for an external orchestration layer."""

    generated_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    root: str
    agents: list[CatalogAgent] = []
    unbonded_skills: list[CatalogSkill] = []
    skill_count: int = 0
    agent_count: int = 0
    command_count: int = 0


class PluginInfo(BaseModel):
    """What ``info`` reports about a plugin root."""

    root: str
    name: str | None = None
    version: str | None = None
    description: str | None = None
    has_manifest: bool = False
    manifest_error: str | None = None
    agents: list[str] = []
    skills: int = 0
    commands: int = 0
    docs: int = 0


def _opt_str(value: object) -> str | None:
    return None if value is None else str(value)


def build_catalog(corpus: PluginCorpus) -> Catalog:
    """Group skills under the agents that bond to or list them."""
    entries = {
        s.name: CatalogSkill(
            name=s.name,
            directory=s.directory,
            description=s.meta.description,
            bond_type=s.meta.bond_type.value if s.meta.bond_type else None,
            sasmp_version=s.meta.sasmp_version,
            scripts=corpus.scripts_for(s),
        )
        for s in corpus.skills
    }
    by_dir = {s.directory: s.name for s in corpus.skills}

    claimed: set[str] = set()
    agents: list[CatalogAgent] = []
    for agent in corpus.agents:
        names: list[str] = []
        for skill in corpus.skills:
            if skill.meta.bonded_agent == agent.name:
                names.append(skill.name)
        for listed in agent.meta.skills:
            name = listed if listed in entries else by_dir.get(listed)
            if name and name not in names:
                names.append(name)
        claimed.update(names)
        agents.append(
            CatalogAgent(
                name=agent.name,
                description=agent.meta.description,
                model=agent.meta.model,
                tools=agent.meta.tools,
                skills=[entries[n] for n in names],
            )
        )

    return Catalog(
        root=str(corpus.tree.root),
        agents=agents,
        unbonded_skills=[entry for name, entry in entries.items() if name not in claimed],
        skill_count=len(corpus.skills),
        agent_count=len(corpus.agents),
        command_count=len(corpus.commands),
    )


def describe_plugin(root: str | Path) -> PluginInfo:
    """Summarise a plugin root from what is actually on disk."""
    corpus = PluginCorpus.load(root)
    tree = corpus.tree
    info = PluginInfo(
        root=str(tree.root),
        agents=sorted(a.name for a in corpus.agents),
        skills=len(tree.glob("skills/*/SKILL.md")),
        commands=len(corpus.commands),
        docs=len(tree.glob("docs/**/*.md")),
    )

    text = tree.read_text(MANIFEST_PATH)
    if text is not None:
        info.has_manifest = True
        try:
            manifest = json.loads(text)
        except json.JSONDecodeError as exc:
            info.manifest_error = f"invalid JSON: {exc.msg} (line {exc.lineno})"
            logger.warning("Could not parse %s: %s", MANIFEST_PATH, exc)
        else:
            if isinstance(manifest, dict):
                info.name = _opt_str(manifest.get("name"))
                info.version = _opt_str(manifest.get("version"))
                info.description = _opt_str(manifest.get("description"))
            else:
                info.manifest_error = "manifest must be a JSON object"
    return info
