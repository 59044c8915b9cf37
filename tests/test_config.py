"""Tests for config module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from promptlib_cli.config import ConfigManager, _deep_merge, _load_yaml


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and cwd at empty temp dirs so only package defaults apply."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in (
        "PROMPTLIB_ROOT",
        "PROMPTLIB_STRICT",
        "PROMPTLIB_LOG_LEVEL",
        "PROMPTLIB_WARN_UNKNOWN_MARKDOWN",
    ):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


class TestLoadYaml:
    def test_load_existing_file(self, tmp_path: Path) -> None:
        f = tmp_path / "test.yaml"
        f.write_text("key: value\nnested:\n  a: 1\n")
        result = _load_yaml(f)
        assert result == {"key": "value", "nested": {"a": 1}}

    def test_load_missing_file(self, tmp_path: Path) -> None:
        result = _load_yaml(tmp_path / "missing.yaml")
        assert result == {}

    def test_load_non_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n")
        assert _load_yaml(f) == {}


class TestDeepMerge:
    def test_nested_merge(self) -> None:
        base = {"required_fields": {"prompt": ["agent"], "agent": []}}
        override = {"required_fields": {"agent": ["tools"]}}
        result = _deep_merge(base, override)
        assert result == {"required_fields": {"prompt": ["agent"], "agent": ["tools"]}}

    def test_override(self) -> None:
        assert _deep_merge({"strict": False}, {"strict": True}) == {"strict": True}


class TestConfigManager:
    def test_defaults(self, isolated: Path) -> None:
        settings = ConfigManager().settings
        assert settings.root == "."
        assert settings.strict is False
        assert ".git" in settings.exclude_patterns
        assert settings.content_dirs == ["prompts", "instructions", "agents"]

    def test_custom_config_path(self, isolated: Path, mock_config: ConfigManager) -> None:
        assert mock_config.settings.exclude_patterns == [".git", "build"]

    def test_project_config(self, isolated: Path) -> None:
        project = isolated / "work" / ".promptlib"
        project.mkdir()
        (project / "settings.yaml").write_text(
            yaml.dump({"root": "library", "required_fields": {"prompt": ["agent"]}})
        )
        settings = ConfigManager().settings
        assert settings.root == "library"
        assert settings.required_fields["prompt"] == ["agent"]

    def test_project_overrides_user(self, isolated: Path) -> None:
        user = isolated / "home" / ".promptlib"
        user.mkdir()
        (user / "settings.yaml").write_text(yaml.dump({"root": "user", "strict": True}))
        project = isolated / "work" / ".promptlib"
        project.mkdir()
        (project / "settings.yaml").write_text(yaml.dump({"root": "project"}))
        settings = ConfigManager().settings
        assert settings.root == "project"
        assert settings.strict is True

    def test_env_overrides(self, isolated: Path) -> None:
        with patch.dict("os.environ", {"PROMPTLIB_STRICT": "true", "PROMPTLIB_ROOT": "lib"}):
            settings = ConfigManager().settings
        assert settings.strict is True
        assert settings.root == "lib"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("0", False), ("no", False), ("off", False), ("1", True), ("Yes", True), ("ON", True)],
    )
    def test_env_boolean_spellings(self, isolated: Path, value: str, expected: bool) -> None:
        with patch.dict(
            "os.environ",
            {"PROMPTLIB_STRICT": value, "PROMPTLIB_WARN_UNKNOWN_MARKDOWN": value},
        ):
            settings = ConfigManager().settings
        assert settings.strict is expected
        assert settings.warn_unknown_markdown is expected

    def test_env_unrecognised_boolean_ignored(self, isolated: Path) -> None:
        project = isolated / "work" / ".promptlib"
        project.mkdir()
        (project / "settings.yaml").write_text(yaml.dump({"strict": True}))
        with patch.dict("os.environ", {"PROMPTLIB_STRICT": "maybe"}):
            settings = ConfigManager().settings
        assert settings.strict is True

    def test_yaml_string_boolean(self, isolated: Path, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yaml"
        custom.write_text("strict: 'off'\nwarn_unknown_markdown: 'nonsense'\n")
        settings = ConfigManager(config_path=str(custom)).settings
        assert settings.strict is False
        assert settings.warn_unknown_markdown is True

    def test_dotenv_file(self, isolated: Path) -> None:
        project = isolated / "work" / ".promptlib"
        project.mkdir()
        (project / ".env").write_text("PROMPTLIB_LOG_LEVEL=debug\nPROMPTLIB_ROOT=from-file\n")
        with patch.dict("os.environ", {"PROMPTLIB_ROOT": "from-env"}):
            settings = ConfigManager().settings
        assert settings.log_level == "DEBUG"
        assert settings.root == "from-env"

    def test_cli_overrides_win(self, isolated: Path) -> None:
        with patch.dict("os.environ", {"PROMPTLIB_STRICT": "false"}):
            config = ConfigManager(cli_overrides={"strict": True})
        assert config.settings.strict is True

    def test_set_override(self, isolated: Path) -> None:
        config = ConfigManager()
        config.set_override("root", "elsewhere")
        assert config.get("root") == "elsewhere"
        assert config.raw["root"] == "elsewhere"
