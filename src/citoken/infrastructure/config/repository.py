"""
Configuration repository for loading and saving config files.

This module provides the infrastructure layer for configuration persistence.
It handles file I/O operations and basic validation.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from citoken.domain.config import WorkflowConfig
from citoken.domain.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_NAME = "citoken"

# Strings first so "//" inside a URL value is kept
_JSONC_TOKEN = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)


def _strip_comments(jsonc_content: str) -> str:
    """Strip // and /* */ comments from JSONC content."""
    def _replace(match: re.Match) -> str:
        token = match.group(0)
        return token if token.startswith('"') else ""
    return _JSONC_TOKEN.sub(_replace, jsonc_content)


class ConfigRepository:
    """
    Repository for configuration file operations.

    Handles loading and saving of configuration files with support for
    JSON and JSONC formats.
    """

    def __init__(self, config_dir: Path):
        """
        Initialize the config repository.

        Args:
            config_dir: Directory holding the configuration file (the project root)
        """
        self.config_dir = config_dir

    def config_path(self, filename: str = CONFIG_NAME) -> Path | None:
        """Path of the existing config file, JSON preferred over JSONC."""
        for suffix in (".json", ".jsonc"):
            path = self.config_dir / f"{filename}{suffix}"
            if path.exists():
                return path
        return None

    def load_json_file(self, filename: str, allow_jsonc: bool = True) -> Dict[str, Any]:
        """
        Load a JSON or JSONC file.

        Args:
            filename: Name of the file to load (without extension)
            allow_jsonc: Whether to try JSONC if JSON is absent

        Returns:
            Parsed JSON data as dictionary

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file cannot be parsed
        """
        json_path = self.config_dir / f"{filename}.json"
        jsonc_path = self.config_dir / f"{filename}.jsonc"

        if json_path.exists():
            try:
                with open(json_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                logger.error("Failed to parse JSON file %s: %s", json_path, e)
                raise ValueError(f"Invalid JSON in {json_path}: {e}") from e

        if allow_jsonc and jsonc_path.exists():
            try:
                with open(jsonc_path, 'r', encoding='utf-8') as f:
                    return json.loads(_strip_comments(f.read()))
            except json.JSONDecodeError as e:
                logger.error("Failed to parse JSONC file %s: %s", jsonc_path, e)
                raise ValueError(f"Invalid JSONC in {jsonc_path}: {e}") from e

        raise FileNotFoundError(
            f"Config file '{filename}.json' or '{filename}.jsonc' not found in {self.config_dir}"
        )

    def save_json_file(self, filename: str, data: Dict[str, Any]) -> Path:
        """
        Save data to a JSON file.

        Args:
            filename: Name of the file to save (without extension)
            data: Data to save

        Returns:
            Path of the written file
        """
        filepath = self.config_dir / f"{filename}.json"
        filepath.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(data, indent=2, ensure_ascii=False)

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(content + "\n")

        logger.info("Saved config file: %s", filepath)
        return filepath

    def load_workflow_config(self) -> WorkflowConfig:
        """
        Load the workflow configuration.

        A project without a config file gets the defaults.

        Returns:
            Parsed WorkflowConfig domain model

        Raises:
            ConfigError: If the file exists but cannot be parsed or validated
        """
        try:
            data = self.load_json_file(CONFIG_NAME)
        except FileNotFoundError:
            logger.debug("No %s config in %s, using defaults", CONFIG_NAME, self.config_dir)
            return WorkflowConfig()
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_NAME} config must be a JSON object")

        try:
            return WorkflowConfig(**data)
        except ValidationError as e:
            logger.error("Failed to validate workflow config: %s", e)
            raise ConfigError(f"Invalid workflow configuration: {e}") from e

    def save_workflow_config(self, config: WorkflowConfig) -> Path:
        """Write the workflow configuration (without the client secret)."""
        return self.save_json_file(CONFIG_NAME, config.to_file_dict())
