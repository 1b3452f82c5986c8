"""Tests for PluginCorpus discovery and document parsing."""

from pathlib import Path

from skillkit.corpus.loader import PluginCorpus
from skillkit.schemas.documents import BondType


class TestPluginCorpus:

    def test_loads_all_documents(self, plugin_root: Path) -> None:
        corpus = PluginCorpus.load(plugin_root)
        assert sorted(s.name for s in corpus.skills) == ["react-fundamentals", "redux-fundamentals"]
        assert sorted(a.name for a in corpus.agents) == ["react-developer", "state-manager"]
        assert sorted(c.name for c in corpus.commands) == ["lint", "setup"]
        assert corpus.errors == []

    def test_skill_document_fields(self, plugin_root: Path) -> None:
        skill = PluginCorpus.load(plugin_root).skill("react-fundamentals")
        assert skill is not None
        assert skill.directory == "react-fundamentals"
        assert skill.meta.bond_type is BondType.PRIMARY
        assert skill.meta.sasmp_version == "1.3.0"
        assert skill.raw["bonded_agent"] == "react-developer"
        assert [h.text for h in skill.headings] == ["React Fundamentals", "Quick Start", "Validation"]

    def test_agent_lists_are_normalised(self, plugin_root: Path) -> None:
        corpus = PluginCorpus.load(plugin_root)
        assert corpus.agent("react-developer").meta.tools == ["Read", "Write", "Bash"]
        assert corpus.agent("state-manager").meta.skills == ["redux-fundamentals"]

    def test_command_without_front_matter(self, plugin_root: Path) -> None:
        corpus = PluginCorpus.load(plugin_root)
        by_name = {c.name: c for c in corpus.commands}
        assert by_name["lint"].description == "Lint the plugin"
        assert by_name["setup"].description == ""
        assert "Set up the plugin" in by_name["setup"].body

    def test_scripts_for(self, plugin_root: Path) -> None:
        corpus = PluginCorpus.load(plugin_root)
        assert corpus.scripts_for(corpus.skill("react-fundamentals")) == ["scripts/validate-react.sh"]
        assert corpus.scripts_for(corpus.skill("redux-fundamentals")) == []

    def test_relpath(self, plugin_root: Path) -> None:
        corpus = PluginCorpus.load(plugin_root)
        skill = corpus.skill("redux-fundamentals")
        assert corpus.relpath(skill.path) == "skills/redux-fundamentals/SKILL.md"

    def test_lookup_missing(self, plugin_root: Path) -> None:
        corpus = PluginCorpus.load(plugin_root)
        assert corpus.skill("vue-composition-api") is None
        assert corpus.agent("nobody") is None


class TestBrokenDocuments:

    def test_missing_front_matter_is_collected(self, plugin_root: Path) -> None:
        (plugin_root / "skills" / "broken").mkdir()
        (plugin_root / "skills" / "broken" / "SKILL.md").write_text("# No metadata\n")
        corpus = PluginCorpus.load(plugin_root)
        assert len(corpus.skills) == 2
        assert [(e.path, e.code) for e in corpus.errors] == [("skills/broken/SKILL.md", "front-matter")]

    def test_schema_errors_are_per_field(self, plugin_root: Path) -> None:
        (plugin_root / "agents" / "bad.md").write_text("---\nname: Bad_Agent\ndescription: ''\n---\n")
        corpus = PluginCorpus.load(plugin_root)
        errors = [e for e in corpus.errors if e.path == "agents/bad.md"]
        assert {e.code for e in errors} == {"schema"}
        assert len(errors) == 2
        assert any(e.message.startswith("name: name must be kebab-case") for e in errors)
        assert any(e.message.startswith("description:") for e in errors)

    def test_bond_without_agent_reported_without_location(self, plugin_root: Path) -> None:
        (plugin_root / "skills" / "loose").mkdir()
        (plugin_root / "skills" / "loose" / "SKILL.md").write_text(
            "---\nname: loose\ndescription: d\nbond_type: SUPPORT_BOND\n---\n"
        )
        corpus = PluginCorpus.load(plugin_root)
        messages = [e.message for e in corpus.errors]
        assert messages == ["bond_type is set but bonded_agent is missing"]

    def test_gitignored_documents_are_skipped(self, plugin_root: Path) -> None:
        (plugin_root / ".gitignore").write_text("skills/draft-*/\n")
        (plugin_root / "skills" / "draft-vue").mkdir()
        (plugin_root / "skills" / "draft-vue" / "SKILL.md").write_text("not parsed")
        corpus = PluginCorpus.load(plugin_root)
        assert corpus.errors == []
