"""
Tests for the Skill Registry.
"""

import json
import logging

import pytest
from cognitive_os.skills import (
    DEFAULT_CATALOG,
    GameInfo,
    RegistryConfigError,
    Skill,
    SkillRegistry,
)


class TestDefaultCatalog:
    """Tests for the built-in catalog."""

    def test_counts(self, registry):
        """Test the catalog ships every skill and game."""
        assert len(registry.all_skills()) == 19
        assert len(registry.game_ids()) == 7

    def test_skills_start_at_default_rating(self, registry):
        """Test fresh skills are unrated."""
        for skill in registry.all_skills():
            assert skill.rating == 1500
            assert skill.confidence == 100

    def test_domains_in_catalog_order(self, registry):
        """Test domains are listed in order of first appearance."""
        assert registry.domains() == [
            "memory", "attention", "control", "perception", "integration", "auditory",
        ]

    def test_every_game_skill_exists(self, registry):
        """Test no game references an unknown skill."""
        for game_id in registry.game_ids():
            for skill in registry.get_module_skills(game_id):
                assert registry.has_skill(skill.id)

    def test_default_builds_independent_skills(self):
        """Test two default registries do not share rating state."""
        a = SkillRegistry.default()
        b = SkillRegistry.default()
        a.get_skill("wm.visual").rating = 1800

        assert b.get_skill("wm.visual").rating == 1500


class TestLookups:
    """Tests for skill and game lookups."""

    def test_module_skills_in_mapping_order(self, registry):
        """Test a game's skills come back in mapping order."""
        skills = registry.get_module_skills("symbol_memory")

        assert [s.id for s in skills] == ["wm.visual", "wm.binding", "attn.selective"]

    def test_games_for_skill(self, registry):
        """Test reverse lookup lists games in catalog order."""
        assert registry.get_games_for_skill("percept.temporal") == [
            "expand_vision", "neural_flow", "psychoacoustic_wizard",
        ]

    def test_untrained_skill_has_no_games(self, registry):
        """Test a catalog skill no game trains."""
        assert registry.get_games_for_skill("attn.sustained") == []

    def test_unknown_game_is_empty_with_warning(self, registry, caplog):
        """Test unknown games log a warning instead of raising."""
        with caplog.at_level(logging.WARNING):
            assert registry.get_module_skills("chess") == []

        assert "Unknown game: chess" in caplog.text

    def test_unknown_skill_lookups(self, registry, caplog):
        """Test unknown skills log a warning and return nothing."""
        with caplog.at_level(logging.WARNING):
            assert registry.get_skill("wm.nope") is None
            assert registry.get_games_for_skill("wm.nope") == []

        assert "Unknown skill: wm.nope" in caplog.text

    def test_skills_by_domain(self, registry):
        """Test domain filtering."""
        ids = [s.id for s in registry.get_skills_by_domain("auditory")]

        assert ids == ["audio.pitch", "audio.rhythm", "audio.parsing"]

    def test_game_name_falls_back_to_id(self, registry):
        """Test unknown game names fall back to the id."""
        assert registry.game_name("morph_matrix") == "Morph Matrix"
        assert registry.game_name("mystery") == "mystery"

    def test_to_dict(self, registry):
        """Test the serialised registry keeps the catalog shape."""
        data = registry.to_dict()

        assert len(data["skills"]) == 19
        assert data["games"]["music_theory"]["intensity"] == "low"


class TestConfiguration:
    """Tests for catalog validation and loading."""

    def test_custom_catalog(self):
        """Test a new game is added through configuration only."""
        registry = SkillRegistry.from_config({
            "skills": [{"id": "s.one", "name": "One", "domain": "d"}],
            "games": {"g": {"name": "G", "skills": ["s.one"]}},
        })

        assert registry.get_games_for_skill("s.one") == ["g"]
        assert registry.get_game("g").intensity == "medium"

    def test_unknown_skill_reference_rejected(self):
        """Test a game mapping to an unknown skill fails fast."""
        with pytest.raises(RegistryConfigError, match="unknown skills"):
            SkillRegistry(
                [Skill(id="a", name="A", domain="d")],
                [GameInfo(id="g", name="G", skill_ids=["a", "b"])],
            )

    def test_duplicate_skill_rejected(self):
        """Test duplicate skill ids are rejected."""
        with pytest.raises(RegistryConfigError, match="Duplicate skill"):
            SkillRegistry(
                [Skill(id="a", name="A", domain="d"), Skill(id="a", name="A2", domain="d")],
                [],
            )

    def test_game_without_skills_rejected(self):
        """Test a game must train at least one skill."""
        with pytest.raises(RegistryConfigError, match="trains no skills"):
            SkillRegistry([Skill(id="a", name="A", domain="d")], [GameInfo(id="g", name="G")])

    def test_bad_intensity_rejected(self):
        """Test intensity must be low, medium or high."""
        with pytest.raises(RegistryConfigError, match="intensity"):
            SkillRegistry(
                [Skill(id="a", name="A", domain="d")],
                [GameInfo(id="g", name="G", skill_ids=["a"], intensity="extreme")],
            )

    def test_malformed_config(self):
        """Test missing keys surface as configuration errors."""
        with pytest.raises(RegistryConfigError, match="Malformed"):
            SkillRegistry.from_config({"skills": [{"id": "a"}], "games": {}})

    def test_from_file(self, tmp_path):
        """Test loading a catalog from JSON."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(DEFAULT_CATALOG))

        registry = SkillRegistry.from_file(str(path))

        assert registry.game_ids() == SkillRegistry.default().game_ids()

    def test_from_missing_file(self, tmp_path):
        """Test an unreadable file is a configuration error."""
        with pytest.raises(RegistryConfigError, match="Cannot read"):
            SkillRegistry.from_file(str(tmp_path / "missing.json"))
