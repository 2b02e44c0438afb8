"""
Unit tests for ConfigLoader and the configuration models.
"""

import pytest

from custom_workspaces.config import ConfigLoader
from custom_workspaces.constants import CONFIG_PATH_ENV, default_config_path
from custom_workspaces.errors import ConfigurationError, ErrorCode, ErrorReporter


class TestLoad:

    def test_full_config(self, write_config):
        path = write_config({
            "workspaceCount": 5,
            "startupDelayMs": 3000,
            "stepDelayMs": 400,
            "focusWorkspaceIndexAfter": 2,
            "workspaces": [{"index": 1, "commands": ["firefox", "~/bin/mail.sh"]}],
            "dynamicRulesEnabled": True,
            "dynamicRules": [{"match": {"appId": "code", "titleRegex": "nixos"}, "workspaceIndex": 3}],
        })

        config = ConfigLoader(path).load()

        assert config.workspace_count == 5
        assert config.startup_delay_ms == 3000
        assert config.step_delay_ms == 400
        assert config.focus_workspace_index_after == 2
        assert config.workspaces[0].commands == ["firefox", "~/bin/mail.sh"]
        assert config.command_count == 2
        assert config.dynamic_rules_enabled is True
        assert config.dynamic_rules[0].match.app_id == "code"
        assert config.dynamic_rules[0].match.title_regex == "nixos"
        assert config.dynamic_rules[0].workspace_index == 3

    def test_defaults(self, write_config):
        config = ConfigLoader(write_config({})).load()

        assert config.workspace_count == 6
        assert config.startup_delay_ms == 7000
        assert config.step_delay_ms == 900
        assert config.focus_workspace_index_after == 0
        assert config.workspaces == []
        assert config.dynamic_rules_enabled is False
        assert config.dynamic_rules == []

    def test_group_and_rule_defaults(self, write_config):
        config = ConfigLoader(write_config({
            "workspaces": [{}],
            "dynamicRules": [{}],
        })).load()

        assert config.workspaces[0].index == 0
        assert config.workspaces[0].commands == []
        assert config.dynamic_rules[0].workspace_index == 0
        assert config.dynamic_rules[0].match.app_id is None

    def test_invalid_title_regex_is_accepted(self, write_config):
        config = ConfigLoader(write_config({"dynamicRules": [{"match": {"titleRegex": "(["}}]})).load()

        assert config.dynamic_rules[0].match.title_regex == "(["

    def test_configuration_is_immutable(self, write_config):
        config = ConfigLoader(write_config({})).load()

        with pytest.raises(Exception):
            config.workspace_count = 3


class TestLoadFailures:

    @pytest.mark.parametrize("content, code", [
        ("{not json", ErrorCode.CONFIG_PARSE_FAILED),
        ("", ErrorCode.CONFIG_PARSE_FAILED),
        ("[1, 2]", ErrorCode.CONFIG_INVALID),
        ('{"workspaceCount": 0}', ErrorCode.CONFIG_INVALID),
        ('{"stepDelayMs": -5}', ErrorCode.CONFIG_INVALID),
        ('{"workspaces": [{"index": -1}]}', ErrorCode.CONFIG_INVALID),
        ('{"workspaces": "nope"}', ErrorCode.CONFIG_INVALID),
    ])
    def test_invalid_content(self, write_config, content, code):
        reporter = ErrorReporter()
        loader = ConfigLoader(write_config(content), reporter=reporter)

        assert loader.load() is None
        assert reporter.counts_by_code == {code.name: 1}

        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_or_raise()
        assert exc_info.value.code == code

    def test_missing_file(self, tmp_path):
        reporter = ErrorReporter()

        assert ConfigLoader(tmp_path / "nope.json", reporter=reporter).load() is None
        assert reporter.counts_by_code == {"CONFIG_NOT_FOUND": 1}

    def test_error_to_dict(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(tmp_path / "nope.json").load_or_raise()

        data = exc_info.value.to_dict()
        assert data["code"] == 1100
        assert data["type"] == "ConfigurationError"
        assert data["context"]["file_path"].endswith("nope.json")


class TestConfigPath:

    def test_default_path_under_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert default_config_path() == tmp_path / ".config" / "custom-workspaces" / "config.json"

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_PATH_ENV, str(tmp_path / "alt.json"))

        assert ConfigLoader().config_path == tmp_path / "alt.json"
