"""
Configuration manager for the application layer.

This module provides the application layer interface for configuration operations.
It orchestrates domain models and infrastructure components.
"""

import logging
from pathlib import Path
from typing import List, Optional

from citoken.domain.config import WorkflowConfig
from citoken.domain.errors import ConfigError
from citoken.infrastructure.config.repository import ConfigRepository

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Application layer manager for configuration operations.

    Provides high-level operations for loading, validating, and
    initializing the project configuration.
    """

    def __init__(self, project_dir: Optional[Path] = None):
        """
        Initialize the config manager.

        Args:
            project_dir: Project root holding citoken.json.
                         Defaults to the current working directory.
        """
        if project_dir is None:
            project_dir = Path.cwd()

        self.project_dir = project_dir
        self.repository = ConfigRepository(project_dir)
        self._config: Optional[WorkflowConfig] = None

    def load_config(self, force_reload: bool = False) -> WorkflowConfig:
        """
        Load the workflow configuration.

        Args:
            force_reload: Whether to force reload from disk

        Returns:
            WorkflowConfig domain model

        Raises:
            ConfigError: If config cannot be loaded
        """
        if self._config is None or force_reload:
            self._config = self.repository.load_workflow_config()
            logger.debug("Loaded workflow config from %s", self.project_dir)
        return self._config

    def init_config(self, overwrite: bool = False, **overrides) -> Path:
        """
        Write a config file with the defaults.

        Args:
            overwrite: Replace an existing config file
            overrides: Top-level sections to use instead of the defaults

        Returns:
            Path of the written file

        Raises:
            ConfigError: If a config file exists and overwrite is False
        """
        existing = self.repository.config_path()
        if existing is not None and not overwrite:
            raise ConfigError(f"Config file already exists: {existing}")

        config = WorkflowConfig(**overrides)
        path = self.repository.save_workflow_config(config)
        self._config = config
        return path

    def validate_config(self, require_client: bool = False) -> List[str]:
        """
        Validate the configuration and return error messages.

        Args:
            require_client: Also require OAuth client settings (needed for acquisition)

        Returns:
            List of validation errors (empty if valid)
        """
        try:
            config = self.load_config(force_reload=True)
        except ConfigError as e:
            return [str(e)]

        errors: List[str] = []

        if config.plaintext_path == config.encrypted_path:
            errors.append("Encrypted token path must differ from the plaintext path")

        if config.ignore_lists.vcs_file == config.ignore_lists.dist_file:
            errors.append("Version-control and distribution ignore lists must be different files")

        if config.branches.default in config.branches.submission:
            errors.append(
                f"Default branch '{config.branches.default}' is also listed as a submission branch"
            )

        if require_client:
            if not config.oauth.client_id:
                errors.append("oauth.client_id is required to acquire a token")
            if not config.oauth.token_url.startswith("https://"):
                errors.append("oauth.token_url must use https")

        for error in errors:
            logger.warning("Config validation: %s", error)
        return errors
