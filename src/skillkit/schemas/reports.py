"""Result models for validator runs and corpus lint runs."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from skillkit.schemas.rules import Status


class CheckResult(BaseModel):
    """Outcome of one check (or one offending file of a per-file check)."""

    section: str
    label: str
    status: Status
    detail: str = ""
    file: str = ""
    hint: str = ""


class ValidationReport(BaseModel):
    """Everything a single validator run produced."""

    generated_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    validator: str
    title: str
    project_path: str
    results: list[CheckResult] = []

    def count(self, status: Status) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def passed(self) -> int:
        return self.count(Status.PASS)

    @property
    def failed(self) -> int:
        return self.count(Status.FAIL)

    @property
    def warnings(self) -> int:
        return self.count(Status.WARN)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


class LintIssue(BaseModel):
    """A single corpus lint finding."""

    severity: Literal["error", "warning"]
    code: str
    path: str
    message: str


class LintReport(BaseModel):
    """All findings for one plugin corpus."""

    generated_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    root: str
    skills_checked: int = 0
    agents_checked: int = 0
    issues: list[LintIssue] = []

    @property
    def errors(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def passes(self, *, strict: bool = False) -> bool:
        if strict:
            return not self.issues
        return self.ok
