"""Rule engine — runs a RuleSet against a project directory."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from skillkit.schemas.reports import CheckResult, ValidationReport
from skillkit.schemas.rules import (
    AbsentCheck,
    Check,
    ContainsCheck,
    CountCheck,
    ExistsCheck,
    JsonCheck,
    PerFileCheck,
    RuleSet,
    Status,
)
from skillkit.shared.project_tree import ProjectTree

logger = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")


def _is_glob(entry: str) -> bool:
    return any(ch in entry for ch in _GLOB_CHARS)


class RuleRunner:
    """Evaluates checks against one project tree."""

    def __init__(self, tree: ProjectTree) -> None:
        self.tree = tree

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def expand(self, entries: list[str]) -> list[str]:
        """Expand a mix of plain paths and globs into existing files.

        Plain paths keep their listed order so "any-of" chains like
        ``src/index.js, src/main.ts`` are tried in order.
        """
        found: list[str] = []
        globs = [e for e in entries if _is_glob(e)]
        for entry in entries:
            if not _is_glob(entry) and self.tree.is_file(entry) and entry not in found:
                found.append(entry)
        if globs:
            for rel in self.tree.glob(globs):
                if rel not in found:
                    found.append(rel)
        return found

    def any_exists(self, paths: list[str], kind: str = "any") -> str | None:
        for p in paths:
            if kind == "file" and self.tree.is_file(p):
                return p
            if kind == "dir" and self.tree.is_dir(p):
                return p
            if kind == "any" and self.tree.exists(p):
                return p
        return None

    def search(self, files: list[str], pattern: str, *, ignore_case: bool = False) -> list[str]:
        """Files (from an already-expanded list) whose contents match ``pattern``."""
        flags = re.MULTILINE | (re.IGNORECASE if ignore_case else 0)
        regex = re.compile(pattern, flags)
        matched = []
        for rel in files:
            text = self.tree.read_text(rel)
            if text is not None and regex.search(text):
                matched.append(rel)
        return matched

    # ------------------------------------------------------------------
    # Check kinds
    # ------------------------------------------------------------------

    def run_check(self, section: str, check: Check) -> list[CheckResult]:
        if check.when and self.any_exists(check.when) is None:
            logger.debug("Skipping %r: none of %s exist", check.label, check.when)
            return []

        def result(status: Status, detail: str = "", file: str = "") -> CheckResult:
            return CheckResult(
                section=section,
                label=check.label,
                status=status,
                detail=detail,
                file=file,
                hint=check.hint if status in (Status.FAIL, Status.WARN) else "",
            )

        match check:
            case ExistsCheck():
                hit = self.any_exists(check.paths, check.type)
                if hit:
                    return [result(Status.PASS, file=hit)]
                return [result(check.on_fail, f"not found: {', '.join(check.paths)}")]

            case ContainsCheck():
                files = self.expand(check.files)
                if not files:
                    return [result(check.on_missing, f"file not found: {', '.join(check.files)}")]
                matched = self.search(files, check.pattern, ignore_case=check.ignore_case)
                if matched:
                    return [result(Status.PASS, file=matched[0])]
                return [result(check.on_fail, f"no match in {len(files)} file(s)")]

            case AbsentCheck():
                files = self.expand(check.files)
                if not files:
                    return []
                matched = self.search(files, check.pattern, ignore_case=check.ignore_case)
                if not matched:
                    return [result(Status.PASS, f"{len(files)} file(s) clean")]
                return [result(check.on_fail, "pattern found", file=rel) for rel in matched]

            case JsonCheck():
                return [self._run_json(check, result)]

            case CountCheck():
                hits = self.tree.glob(check.globs, include_ignored=check.include_ignored)
                status = Status.PASS if len(hits) >= check.min else check.on_fail
                return [result(status, f"{len(hits)} file(s) found")]

            case PerFileCheck():
                return self._run_per_file(check, result)

        raise TypeError(f"Unsupported check kind: {check!r}")

    def _run_json(self, check: JsonCheck, result) -> CheckResult:
        text = self.tree.read_text(check.path)
        if text is None:
            return result(check.on_missing, f"file not found: {check.path}")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            return result(check.on_fail, f"invalid JSON: {exc.msg} (line {exc.lineno})", file=check.path)
        if check.keys:
            if not isinstance(data, dict):
                return result(check.on_fail, "expected a JSON object", file=check.path)
            missing = [k for k in check.keys if k not in data]
            if missing:
                return result(check.on_fail, f"missing keys: {', '.join(missing)}", file=check.path)
        return result(Status.PASS, file=check.path)

    def _run_per_file(self, check: PerFileCheck, result) -> list[CheckResult]:
        files = self.tree.glob(check.globs)
        if not files:
            return []
        pattern = re.compile(check.pattern, re.MULTILINE) if check.pattern else None
        unless = re.compile(check.unless, re.MULTILINE) if check.unless else None
        name_re = re.compile(check.name_pattern) if check.name_pattern else None

        offenders: list[CheckResult] = []
        for rel in files:
            if name_re is not None and not name_re.search(Path(rel).name):
                offenders.append(result(check.on_fail, "file name", file=rel))
                continue
            if pattern is None:
                continue
            text = self.tree.read_text(rel)
            if text is None or not pattern.search(text):
                continue
            if unless is not None and unless.search(text):
                continue
            offenders.append(result(check.on_fail, file=rel))

        if offenders:
            return offenders
        return [result(Status.PASS, f"{len(files)} file(s) checked")]


def run_validator(rule_set: RuleSet, project_path: str | Path) -> ValidationReport:
    """Run every check of ``rule_set`` against ``project_path``."""
    tree = ProjectTree(project_path)
    runner = RuleRunner(tree)
    report = ValidationReport(
        validator=rule_set.name,
        title=rule_set.title,
        project_path=str(tree.root),
    )

    if rule_set.requires and runner.any_exists(rule_set.requires) is None:
        label = rule_set.requires_label or "Required project files"
        report.results.append(
            CheckResult(
                section="Prerequisites",
                label=label,
                status=Status.FAIL,
                detail=f"not found: {', '.join(rule_set.requires)}",
            )
        )
        logger.info("Validator %s aborted: prerequisites missing", rule_set.name)
        return report

    for section in rule_set.sections:
        for check in section.checks:
            report.results.extend(runner.run_check(section.title, check))

    logger.info(
        "Validator %s: %d passed, %d failed, %d warnings",
        rule_set.name, report.passed, report.failed, report.warnings,
    )
    return report


def applies_to(rule_set: RuleSet, project_path: str | Path | ProjectTree) -> bool:
    """Decide whether ``validate --all`` should run ``rule_set`` for a project.

    Rule sets without a ``detect`` block always apply. Otherwise any listed
    path existing, or any ``contains`` pattern matching its file, is enough.
    """
    if rule_set.detect is None:
        return True
    tree = project_path if isinstance(project_path, ProjectTree) else ProjectTree(project_path)
    runner = RuleRunner(tree)
    if rule_set.detect.paths and runner.any_exists(rule_set.detect.paths):
        return True
    for file, pattern in rule_set.detect.contains.items():
        if runner.search(runner.expand([file]), pattern):
            return True
    return False
