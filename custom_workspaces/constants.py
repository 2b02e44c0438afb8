"""Shared constants for the session helper."""

import os
from pathlib import Path

APP_NAME = "custom-workspaces"

# Environment variable overriding the configuration file location
CONFIG_PATH_ENV = "CUSTOM_WORKSPACES_CONFIG"

# Defaults applied when a configuration field is omitted
DEFAULT_WORKSPACE_COUNT = 6
DEFAULT_STARTUP_DELAY_MS = 7000
DEFAULT_STEP_DELAY_MS = 900

# Wait before matching a new window so app_id/title can settle
WINDOW_SETTLE_DELAY_MS = 250

# Suffix stripped from application ids (launcher file name)
LAUNCHER_FILE_SUFFIX = ".desktop"


def default_config_path() -> Path:
    """Return the per-user configuration path, honouring the env override."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / APP_NAME / "config.json"
