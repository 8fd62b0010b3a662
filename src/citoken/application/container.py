"""
Dependency injection container for the application.

This module provides a centralized way to create and manage application dependencies.
It follows the dependency injection pattern for clean architecture.
"""

import logging
from pathlib import Path
from typing import Optional

import httpx

from ..domain.config import WorkflowConfig
from ..infrastructure.config.manager import ConfigManager
from ..infrastructure.secrets.store import SecretStoreWriter
from ..infrastructure.tools.git import GitRepository
from ..infrastructure.tools.runner import CommandRunner
from ..infrastructure.tools.travis import TravisClient
from .encryption_service import EncryptionService
from .manifest_service import ManifestService
from .packaging_filter import PackagingFilter
from .slug_doctor import SlugDoctor
from .token_acquirer import TokenAcquirer
from .workflow_service import WorkflowService

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Manages the creation and lifecycle of application services and infrastructure components.
    """

    def __init__(
        self,
        project_dir: Optional[Path] = None,
        runner: Optional[CommandRunner] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the container.

        Args:
            project_dir: Project root (defaults to the current directory)
            runner: Command runner override, used by tests
            http_client: HTTP client override for the token exchange, used by tests
        """
        self.project_dir = (project_dir or Path.cwd()).resolve()
        self._runner = runner
        self._http_client = http_client

        self._config_manager: Optional[ConfigManager] = None
        self._git: Optional[GitRepository] = None
        self._travis: Optional[TravisClient] = None
        self._store: Optional[SecretStoreWriter] = None
        self._acquirer: Optional[TokenAcquirer] = None
        self._encryption_service: Optional[EncryptionService] = None
        self._manifest_service: Optional[ManifestService] = None
        self._packaging_filter: Optional[PackagingFilter] = None
        self._slug_doctor: Optional[SlugDoctor] = None
        self._workflow_service: Optional[WorkflowService] = None

    @property
    def config_manager(self) -> ConfigManager:
        """Get the configuration manager."""
        if self._config_manager is None:
            self._config_manager = ConfigManager(self.project_dir)
        return self._config_manager

    @property
    def config(self) -> WorkflowConfig:
        """Get the loaded workflow configuration."""
        return self.config_manager.load_config()

    @property
    def runner(self) -> CommandRunner:
        """Get the external command runner."""
        if self._runner is None:
            self._runner = CommandRunner(self.project_dir, timeout=self.config.ci.command_timeout)
        return self._runner

    @property
    def git(self) -> GitRepository:
        """Get the git adapter."""
        if self._git is None:
            self._git = GitRepository(self.runner)
        return self._git

    @property
    def travis(self) -> TravisClient:
        """Get the CI vendor CLI client."""
        if self._travis is None:
            self._travis = TravisClient(self.runner, self.config.ci.cli, self.config.ci.endpoint)
        return self._travis

    @property
    def store(self) -> SecretStoreWriter:
        """Get the plaintext token store."""
        if self._store is None:
            self._store = SecretStoreWriter(self.project_dir)
        return self._store

    @property
    def acquirer(self) -> TokenAcquirer:
        """Get the OAuth token acquirer."""
        if self._acquirer is None:
            self._acquirer = TokenAcquirer(self.config.oauth, http_client=self._http_client)
        return self._acquirer

    @property
    def encryption_service(self) -> EncryptionService:
        """Get the encryption service."""
        if self._encryption_service is None:
            self._encryption_service = EncryptionService(self.project_dir, self.config, self.travis)
        return self._encryption_service

    @property
    def manifest_service(self) -> ManifestService:
        """Get the build manifest updater."""
        if self._manifest_service is None:
            self._manifest_service = ManifestService(self.project_dir, self.config)
        return self._manifest_service

    @property
    def packaging_filter(self) -> PackagingFilter:
        """Get the conditional packaging filter."""
        if self._packaging_filter is None:
            self._packaging_filter = PackagingFilter(self.project_dir, self.config, self.git)
        return self._packaging_filter

    @property
    def slug_doctor(self) -> SlugDoctor:
        """Get the repository slug doctor."""
        if self._slug_doctor is None:
            self._slug_doctor = SlugDoctor(self.git, self.config.ci.repo_slug)
        return self._slug_doctor

    @property
    def workflow_service(self) -> WorkflowService:
        """Get the end-to-end workflow service."""
        if self._workflow_service is None:
            self._workflow_service = WorkflowService(
                self.project_dir,
                self.config,
                acquirer=self.acquirer,
                store=self.store,
                encryption=self.encryption_service,
                manifest=self.manifest_service,
                packaging=self.packaging_filter,
                slug_doctor=self.slug_doctor,
            )
        return self._workflow_service
