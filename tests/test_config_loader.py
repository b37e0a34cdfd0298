"""Tests for TOML config loading and profile layering."""

import pytest
from pathlib import Path

from sitescan.config import loader
from sitescan.config.loader import apply_config_sources, load_and_merge_configs
from sitescan.config.settings import OutputFormat, ScanConfig
from sitescan.exceptions import ConfigError


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    monkeypatch.setattr(loader, "USER_CONFIG_FILE", tmp_path / "no-user-config.toml")


class TestLoadAndMergeConfigs:

    def test_no_files_gives_empty_config(self, tmp_path):
        assert load_and_merge_configs(cwd=tmp_path) == {}

    def test_project_file_is_loaded(self, tmp_path):
        (tmp_path / ".sitescan.toml").write_text('ignore_patterns = ["*.log"]\nfollow_symlinks = true\n')

        raw = load_and_merge_configs(cwd=tmp_path)

        assert raw == {"ignore_patterns": ["*.log"], "follow_symlinks": True}

    def test_pyproject_tool_table_is_used(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "blog"\n\n[tool.sitescan]\nignore = ["drafts/"]\n'
        )

        assert load_and_merge_configs(cwd=tmp_path) == {"ignore": ["drafts/"]}

    def test_dotfile_takes_precedence_over_pyproject(self, tmp_path):
        (tmp_path / ".sitescan.toml").write_text('output_format = "json"\n')
        (tmp_path / "pyproject.toml").write_text('[tool.sitescan]\noutput_format = "nul"\n')

        assert load_and_merge_configs(cwd=tmp_path)["output_format"] == "json"

    def test_project_values_override_user_values(self, tmp_path, monkeypatch):
        user_file = tmp_path / "user.toml"
        user_file.write_text('follow_symlinks = true\nsummary = true\n[profiles.mine]\nignore = ["a"]\n')
        monkeypatch.setattr(loader, "USER_CONFIG_FILE", user_file)
        project = tmp_path / "project"
        project.mkdir()
        (project / "sitescan.toml").write_text('follow_symlinks = false\n[profiles.theirs]\nignore = ["b"]\n')

        raw = load_and_merge_configs(cwd=project)

        assert raw["follow_symlinks"] is False
        assert raw["summary"] is True
        assert set(raw["profiles"]) == {"mine", "theirs"}

    def test_user_profiles_survive_project_without_profiles(self, tmp_path, monkeypatch):
        user_file = tmp_path / "user.toml"
        user_file.write_text("[profiles.mine]\nignore = [\"a\"]\n")
        monkeypatch.setattr(loader, "USER_CONFIG_FILE", user_file)
        project = tmp_path / "project"
        project.mkdir()
        (project / ".sitescan.toml").write_text("summary = true\n")

        raw = load_and_merge_configs(cwd=project)

        assert raw == {"profiles": {"mine": {"ignore": ["a"]}}, "summary": True}

    def test_invalid_toml_raises_config_error(self, tmp_path):
        (tmp_path / ".sitescan.toml").write_text("ignore_patterns = [unclosed\n")
        with pytest.raises(ConfigError):
            load_and_merge_configs(cwd=tmp_path)


class TestApplyConfigSources:

    def test_keys_are_mapped_to_scan_config_fields(self):
        options = apply_config_sources({"ignore": "*.bak", "summary": True, "unknown_key": 1})
        assert options == {"ignore_patterns": ["*.bak"], "show_summary": True}

    def test_profile_overrides_global_values(self):
        raw = {
            "follow_symlinks": False,
            "profiles": {"docs": {"follow_symlinks": True, "ignore_patterns": ["blog/"]}},
        }

        options = apply_config_sources(raw, "docs")

        assert options == {"follow_symlinks": True, "ignore_patterns": ["blog/"]}

    def test_missing_profile_raises(self):
        with pytest.raises(ConfigError, match="nope"):
            apply_config_sources({"profiles": {}}, "nope")

    def test_empty_profile_table_is_accepted(self):
        raw = {"follow_symlinks": True, "profiles": {"bare": {}}}
        assert apply_config_sources(raw, "bare") == {"follow_symlinks": True}

    def test_bad_pattern_type_raises(self):
        with pytest.raises(ConfigError):
            apply_config_sources({"ignore_patterns": [1, 2]})


class TestScanConfig:

    def test_defaults(self):
        config = ScanConfig()
        assert config.root == Path(".")
        assert config.ignore_patterns == []
        assert config.use_default_ignores is True
        assert config.output_format == OutputFormat.LINES
        assert config.base_dir == Path.cwd().resolve()

    def test_strings_are_coerced(self):
        config = ScanConfig(root="site", output_format="json")
        assert config.root == Path("site")
        assert config.output_format == OutputFormat.JSON

