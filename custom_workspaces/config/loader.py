"""
Configuration loader for the session JSON file.

The file is a single JSON object at ~/.config/custom-workspaces/config.json.
A missing, unreadable or malformed file yields no configuration; the
session then does nothing.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..constants import default_config_path
from ..errors import ConfigurationError, ErrorCode, ErrorReporter
from ..models import Configuration

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads the session Configuration from JSON."""

    def __init__(self, config_path: Optional[Path] = None, reporter: Optional[ErrorReporter] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to config.json (defaults to the per-user path)
            reporter: Error sink for load failures
        """
        self.config_path = Path(config_path) if config_path else default_config_path()
        self.reporter = reporter or ErrorReporter()

    def load(self) -> Optional[Configuration]:
        """
        Load and validate the configuration.

        Returns:
            Configuration, or None when the file is missing or invalid
        """
        try:
            return self.load_or_raise()
        except ConfigurationError as e:
            self.reporter.report(e)
            return None

    def load_or_raise(self) -> Configuration:
        """
        Load and validate the configuration.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        path = str(self.config_path)

        if not self.config_path.exists():
            raise ConfigurationError(ErrorCode.CONFIG_NOT_FOUND, path, "file not found")

        try:
            raw = self.config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(ErrorCode.CONFIG_READ_FAILED, path, str(e)) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(ErrorCode.CONFIG_PARSE_FAILED, path, f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                ErrorCode.CONFIG_INVALID, path, "top-level value must be a JSON object"
            )

        try:
            config = Configuration.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(ErrorCode.CONFIG_INVALID, path, str(e)) from e

        logger.info(
            f"Loaded configuration from {path}: {config.workspace_count} workspaces, "
            f"{len(config.workspaces)} groups, {len(config.dynamic_rules)} rules"
        )
        return config
