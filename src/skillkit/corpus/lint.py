"""Corpus linter — cross-document consistency checks for a plugin root."""

from __future__ import annotations

import logging
import re
from collections import Counter

from skillkit.corpus.frontmatter import count_fences
from skillkit.corpus.loader import PluginCorpus
from skillkit.schemas.config import LintSettings
from skillkit.schemas.documents import AgentDocument, SkillDocument
from skillkit.schemas.reports import LintIssue, LintReport

logger = logging.getLogger(__name__)

# `scripts/validate-pwa.sh`, `./scripts/generate-component.sh MyButton`
_SCRIPT_REF_RE = re.compile(r"(?<![\w/-])(?:\./)?scripts/([\w][\w.\-/]*)")


def _error(code: str, path: str, message: str) -> LintIssue:
    return LintIssue(severity="error", code=code, path=path, message=message)


def _warning(code: str, path: str, message: str) -> LintIssue:
    return LintIssue(severity="warning", code=code, path=path, message=message)


def _check_body(rel: str, doc: SkillDocument | AgentDocument) -> list[LintIssue]:
    issues = []
    if not doc.body.strip():
        issues.append(_warning("empty-body", rel, "no markdown content after the front matter"))
    fences = count_fences(doc.body)
    if fences % 2:
        issues.append(_error("unclosed-fence", rel, f"odd number of code fences ({fences})"))
    return issues


def _check_sections(rel: str, skill: SkillDocument, required: list[str]) -> list[LintIssue]:
    texts = [h.text.lower() for h in skill.headings]
    issues = []
    for section in required:
        wanted = section.lower()
        if not any(wanted in text for text in texts):
            issues.append(_warning("missing-section", rel, f"missing section heading {section!r}"))
    return issues


def _names_directory(ref: str, available: set[str]) -> bool:
    prefix = ref.rstrip("/") + "/"
    return any(path.startswith(prefix) for path in available)


def _check_scripts(corpus: PluginCorpus, rel: str, skill: SkillDocument) -> list[LintIssue]:
    available = set(corpus.scripts_for(skill))
    issues = []
    seen: set[str] = set()
    for m in _SCRIPT_REF_RE.finditer(skill.body):
        ref = "scripts/" + m.group(1).rstrip(".")
        if ref in seen:
            continue
        seen.add(ref)
        if ref not in available and not _names_directory(ref, available):
            issues.append(_error("missing-script", rel, f"body references {ref} which does not exist"))
    return issues


def _duplicates(names: list[tuple[str, str]], kind: str) -> list[LintIssue]:
    counts = Counter(name for name, _ in names)
    first: dict[str, str] = {}
    issues = []
    for name, rel in names:
        if counts[name] < 2:
            continue
        if name not in first:
            first[name] = rel
            continue
        issues.append(_error("duplicate-name", rel, f"{kind} name {name!r} already used by {first[name]}"))
    return issues


def lint_corpus(corpus: PluginCorpus, settings: LintSettings | None = None) -> LintReport:
    """Lint every document of ``corpus`` and return the findings."""
    settings = settings or LintSettings()
    report = LintReport(
        root=str(corpus.tree.root),
        skills_checked=len(corpus.skills),
        agents_checked=len(corpus.agents),
    )
    issues = report.issues

    for err in corpus.errors:
        issues.append(_error(err.code, err.path, err.message))

    agent_names = {a.name for a in corpus.agents}
    skill_names = {s.name for s in corpus.skills} | {s.directory for s in corpus.skills}
    listed_by_agents = {skill for a in corpus.agents for skill in a.meta.skills}

    for skill in corpus.skills:
        rel = corpus.relpath(skill.path)
        if skill.name != skill.directory:
            issues.append(_warning(
                "name-mismatch", rel,
                f"name {skill.name!r} differs from directory {skill.directory!r}",
            ))
        bonded = skill.meta.bonded_agent
        if bonded and bonded not in agent_names:
            issues.append(_error("unknown-agent", rel, f"bonded_agent {bonded!r} is not defined in agents/"))
        if skill.meta.bond_type is not None and skill.meta.bond_type not in settings.allowed_bond_types:
            issues.append(_error("bond-type", rel, f"bond_type {skill.meta.bond_type.value} is not allowed"))
        if agent_names and bonded not in agent_names and not (
            {skill.name, skill.directory} & listed_by_agents
        ):
            issues.append(_warning("orphan-skill", rel, "no agent bonds to or lists this skill"))
        issues.extend(_check_sections(rel, skill, settings.required_sections))
        issues.extend(_check_body(rel, skill))
        issues.extend(_check_scripts(corpus, rel, skill))

    for agent in corpus.agents:
        rel = corpus.relpath(agent.path)
        for listed in agent.meta.skills:
            if listed not in skill_names:
                issues.append(_warning("unknown-skill", rel, f"lists unknown skill {listed!r}"))
        issues.extend(_check_body(rel, agent))

    issues.extend(_duplicates([(s.name, corpus.relpath(s.path)) for s in corpus.skills], "skill"))
    issues.extend(_duplicates([(a.name, corpus.relpath(a.path)) for a in corpus.agents], "agent"))

    logger.info(
        "Lint %s: %d errors, %d warnings", report.root, len(report.errors), len(report.warnings),
    )
    return report
