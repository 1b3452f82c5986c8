"""Tests for the corpus linter."""

from pathlib import Path

from skillkit.corpus.lint import lint_corpus
from skillkit.corpus.loader import PluginCorpus
from skillkit.schemas.config import LintSettings
from skillkit.schemas.documents import BondType


def _lint(root: Path, settings: LintSettings | None = None):
    return lint_corpus(PluginCorpus.load(root), settings)


def _codes(report) -> list[str]:
    return sorted(i.code for i in report.issues)


def _write_skill(root: Path, directory: str, front: str, body: str = "# Title\n\nText.\n") -> None:
    skill_dir = root / "skills" / directory
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(f"---\n{front}---\n{body}")


class TestLintCorpus:

    def test_clean_plugin(self, plugin_root: Path) -> None:
        report = _lint(plugin_root)
        assert report.issues == []
        assert report.ok
        assert report.passes(strict=True)
        assert report.skills_checked == 2
        assert report.agents_checked == 2

    def test_load_errors_become_issues(self, plugin_root: Path) -> None:
        _write_skill(plugin_root, "broken", "name: [unclosed\n")
        report = _lint(plugin_root)
        assert [(i.code, i.severity, i.path) for i in report.issues] == [
            ("front-matter", "error", "skills/broken/SKILL.md"),
        ]
        assert not report.ok

    def test_name_mismatch_is_warning(self, plugin_root: Path) -> None:
        _write_skill(
            plugin_root, "react-hooks",
            "name: hooks-patterns\ndescription: d\nbonded_agent: react-developer\n",
        )
        report = _lint(plugin_root)
        assert _codes(report) == ["name-mismatch"]
        assert report.ok
        assert not report.passes(strict=True)

    def test_unknown_agent(self, plugin_root: Path) -> None:
        _write_skill(plugin_root, "vue-basics", "name: vue-basics\ndescription: d\nbonded_agent: vue-developer\n")
        report = _lint(plugin_root)
        assert "unknown-agent" in _codes(report)
        # not bonded to a real agent and not listed by one
        assert "orphan-skill" in _codes(report)

    def test_bond_type_not_allowed(self, plugin_root: Path) -> None:
        settings = LintSettings(allowed_bond_types=[BondType.PRIMARY])
        report = _lint(plugin_root, settings)
        assert [(i.code, i.path) for i in report.issues] == [
            ("bond-type", "skills/redux-fundamentals/SKILL.md"),
        ]

    def test_orphan_skill_listed_by_directory(self, plugin_root: Path) -> None:
        _write_skill(plugin_root, "css-grid", "name: css-grid\ndescription: d\n")
        assert _codes(_lint(plugin_root)) == ["orphan-skill"]

        agent = plugin_root / "agents" / "react-developer.md"
        agent.write_text(agent.read_text().replace("  - react-fundamentals\n", "  - react-fundamentals\n  - css-grid\n"))
        assert _codes(_lint(plugin_root)) == []

    def test_no_orphans_without_agents(self, tmp_path: Path) -> None:
        _write_skill(tmp_path, "css-grid", "name: css-grid\ndescription: d\n")
        assert _codes(_lint(tmp_path)) == []

    def test_required_sections_match_substrings(self, plugin_root: Path) -> None:
        settings = LintSettings(required_sections=["quick start", "Troubleshooting"])
        report = _lint(plugin_root, settings)
        assert _codes(report) == ["missing-section", "missing-section"]
        assert all("Troubleshooting" in i.message for i in report.issues)

    def test_empty_body_and_unclosed_fence(self, plugin_root: Path) -> None:
        _write_skill(plugin_root, "empty", "name: empty\ndescription: d\nbonded_agent: state-manager\n", body="\n")
        _write_skill(
            plugin_root, "fenced",
            "name: fenced\ndescription: d\nbonded_agent: state-manager\n",
            body="# Fenced\n\n```js\nconst a = 1;\n",
        )
        report = _lint(plugin_root)
        by_path = {(i.path, i.code): i.severity for i in report.issues}
        assert by_path == {
            ("skills/empty/SKILL.md", "empty-body"): "warning",
            ("skills/fenced/SKILL.md", "unclosed-fence"): "error",
        }

    def test_missing_script_reference(self, plugin_root: Path) -> None:
        skill = plugin_root / "skills" / "react-fundamentals" / "SKILL.md"
        skill.write_text(
            skill.read_text()
            + "\nThen run `./scripts/generate-component.sh Button`.\n"
            + "See scripts/validate-react.sh.\n"
        )
        report = _lint(plugin_root)
        assert [(i.code, i.message) for i in report.issues] == [
            ("missing-script", "body references scripts/generate-component.sh which does not exist"),
        ]

    def test_script_directory_reference(self, plugin_root: Path) -> None:
        skill_dir = plugin_root / "skills" / "react-fundamentals"
        (skill_dir / "scripts" / "templates").mkdir()
        (skill_dir / "scripts" / "templates" / "component.tsx.j2").write_text("")
        skill = skill_dir / "SKILL.md"
        skill.write_text(
            skill.read_text()
            + "\nTemplates live in `scripts/templates/` (also scripts/templates).\n"
            + "Layouts are in scripts/layouts/.\n"
        )
        report = _lint(plugin_root)
        assert [(i.code, i.message) for i in report.issues] == [
            ("missing-script", "body references scripts/layouts/ which does not exist"),
        ]

    def test_agent_version_checked(self, plugin_root: Path) -> None:
        agent = plugin_root / "agents" / "state-manager.md"
        agent.write_text(agent.read_text().replace("skills: redux-fundamentals", "skills: redux-fundamentals\nsasmp_version: v1.x"))
        report = _lint(plugin_root)
        schema = [i for i in report.issues if i.code == "schema"]
        assert [(i.path, i.severity) for i in schema] == [("agents/state-manager.md", "error")]
        assert schema[0].message.startswith("sasmp_version:")
        assert not report.ok

    def test_unknown_skill_listed_by_agent(self, plugin_root: Path) -> None:
        agent = plugin_root / "agents" / "state-manager.md"
        agent.write_text(agent.read_text().replace("skills: redux-fundamentals", "skills: redux-fundamentals, mobx"))
        report = _lint(plugin_root)
        assert [(i.code, i.path) for i in report.issues] == [("unknown-skill", "agents/state-manager.md")]

    def test_duplicate_skill_names(self, plugin_root: Path) -> None:
        _write_skill(
            plugin_root, "redux-copy",
            "name: redux-fundamentals\ndescription: d\nbonded_agent: state-manager\n",
        )
        report = _lint(plugin_root)
        duplicates = [i for i in report.issues if i.code == "duplicate-name"]
        assert len(duplicates) == 1
        assert duplicates[0].path == "skills/redux-fundamentals/SKILL.md"
        assert "skills/redux-copy/SKILL.md" in duplicates[0].message
