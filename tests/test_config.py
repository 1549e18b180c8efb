"""
Tests for environment-driven configuration.
"""

import pytest

from colorinsight.utils.config import Config
from colorinsight.utils.constants import DEFAULT_ARCHETYPES

CONFIG_VARS = (
    "COLORINSIGHT_ENV", "GOOGLE_AI_MODEL", "SEARCH_MODE", "SHOW_LANDING", "MAX_UPLOAD_MB",
    "EXPORT_STRATEGY", "OUTPUT_DIR", "ARCHETYPES_FILE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Fixture clearing config variables and running from an empty directory."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestConfig:
    """Tests for the Config class."""

    def test_defaults(self, clean_env):
        config = Config()

        assert config.google_ai_model == "gemini-2.5-flash"
        assert config.search_mode == "grounded"
        assert config.show_landing is False
        assert config.max_upload_bytes == 20 * 1024 * 1024
        assert config.export_strategy == "structured"
        assert [a["name"] for a in config.archetypes] == [a["name"] for a in DEFAULT_ARCHETYPES]

    def test_overrides(self, clean_env):
        clean_env.setenv("SEARCH_MODE", "Simulated")
        clean_env.setenv("SHOW_LANDING", "yes")
        clean_env.setenv("MAX_UPLOAD_MB", "5")
        clean_env.setenv("EXPORT_STRATEGY", "snapshot")

        config = Config()

        assert config.search_mode == "simulated"
        assert config.show_landing is True
        assert config.max_upload_bytes == 5 * 1024 * 1024
        assert config.export_strategy == "snapshot"

    def test_upload_cap_disabled(self, clean_env):
        clean_env.setenv("MAX_UPLOAD_MB", "0")
        assert Config().max_upload_bytes is None

    def test_archetypes_from_yaml(self, clean_env, tmp_path):
        archetypes_file = tmp_path / "archetypes.yaml"
        archetypes_file.write_text(
            "archetypes:\n"
            "  - name: Coastal\n"
            "    brief: Sea and sand\n"
            "  - name: Retired\n"
            "    enabled: false\n"
            "  - name: Urban\n"
            "  - name: Alpine\n"
            "    brief: Snow and stone\n"
            "  - name: Desert\n"
            "    brief: Sun-baked clay\n"
        )
        clean_env.setenv("ARCHETYPES_FILE", str(archetypes_file))

        config = Config()

        assert config.archetypes == [
            {"name": "Coastal", "brief": "Sea and sand"},
            {"name": "Urban", "brief": ""},
            {"name": "Alpine", "brief": "Snow and stone"},
            {"name": "Desert", "brief": "Sun-baked clay"},
        ]

    @pytest.mark.parametrize("names", [["Coastal", "Urban"], ["A", "B", "C", "D", "E"]])
    def test_wrong_archetype_count_falls_back(self, clean_env, tmp_path, capsys, names):
        archetypes_file = tmp_path / "archetypes.yaml"
        archetypes_file.write_text("archetypes:\n" + "".join(f"  - name: {name}\n" for name in names))
        clean_env.setenv("ARCHETYPES_FILE", str(archetypes_file))

        config = Config()

        assert config.archetypes == list(DEFAULT_ARCHETYPES)
        assert f"enables {len(names)} archetypes" in capsys.readouterr().out

    def test_missing_archetypes_file(self, clean_env, tmp_path):
        clean_env.setenv("ARCHETYPES_FILE", str(tmp_path / "missing.yaml"))
        assert Config().archetypes == list(DEFAULT_ARCHETYPES)

    def test_bundled_archetypes(self, clean_env):
        assert [a["name"] for a in Config().archetypes] == [
            "Global Trend", "Market Safe", "Bold Innovation", "Balanced Classic",
        ]


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
