# student_registry/application/bootstrap/application_bootstrap.py
"""
Application bootstrap and dependency injection container.
"""

import logging
from typing import Optional

from ...domain.interfaces import ConfigurationProvider
from ...infrastructure.configuration.configuration_manager import EnhancedConfigurationManager
from ...infrastructure.database.connection_factory import ConnectionFactory
from ...infrastructure.database.connection_manager import JvmManager
from ...infrastructure.factories.database_factory import DatabaseConnectionFactory, RepositoryFactory
from ..services.student_service import StudentService

logger = logging.getLogger(__name__)


class ApplicationContainer:
    """Dependency injection container for the application."""

    def __init__(self, config_file_path: str = "config.yaml",
                 config_manager: Optional[ConfigurationProvider] = None, start_jvm: bool = True):
        self.config_manager: Optional[ConfigurationProvider] = config_manager
        self.connection_factory: Optional[ConnectionFactory] = None
        self.repository_factory: Optional[RepositoryFactory] = None
        self.student_service: Optional[StudentService] = None
        self.start_jvm = start_jvm

        if self.config_manager is None:
            self._initialize_configuration(config_file_path)

        self._initialize_database()
        self._initialize_services()

    def _initialize_configuration(self, config_file_path: str) -> None:
        """Initialize configuration manager."""
        self.config_manager = EnhancedConfigurationManager(config_file_path)

        validation_errors = self.config_manager.validate_configuration()
        if validation_errors:
            logger.warning(f"Configuration validation warnings: {validation_errors}")

        logger.info("Configuration manager initialized")

    def _initialize_database(self) -> None:
        """Initialize the connection factory and repository factory."""
        try:
            self.connection_factory = DatabaseConnectionFactory.create_connection_factory(
                self.config_manager.get_section('database'),
                start_jvm=self.start_jvm
            )
        except Exception as e:
            logger.error(f"Failed to initialize database access: {e}")
            raise

        self.repository_factory = RepositoryFactory(
            self.connection_factory,
            self.config_manager.get_section('legacy')
        )
        logger.info("Database access initialized")

    def _initialize_services(self) -> None:
        self.student_service = StudentService(self.repository_factory.create_student_repository())
        logger.info("Student service initialized")

    def get_student_service(self) -> StudentService:
        return self.student_service

    def get_connection_factory(self) -> ConnectionFactory:
        return self.connection_factory

    def get_configuration_manager(self) -> ConfigurationProvider:
        """Get configuration manager instance."""
        return self.config_manager

    def shutdown(self) -> None:
        """Shutdown application container and stop the JVM if it was started."""
        try:
            JvmManager().shutdown_jvm()
            logger.info("Application container shutdown completed")
        except Exception as e:
            logger.error(f"Error during application shutdown: {e}")
