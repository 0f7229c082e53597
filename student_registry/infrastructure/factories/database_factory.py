# student_registry/infrastructure/factories/database_factory.py
"""
Factory for creating the connection factory, lifecycle managers and repositories.
"""

import logging
from typing import Dict, Any, Union

from ...domain.models import DatabaseKind
from ..database.connection_factory import ConnectionFactory
from ..database.jvm_initializer import collect_jdbc_jars, initialize_jvm_once
from ..database.legacy_dao import LegacyDao
from ..repositories.legacy.student_repository import (
    DEFAULT_TEST_NAME_MARKER, DEFAULT_TEST_SCHOOL_CODE, StudentLegacyRepository
)

logger = logging.getLogger(__name__)


class DatabaseConnectionFactory:
    """Factory for the vendor connection factory."""

    @staticmethod
    def create_connection_factory(database_config: Dict[str, Any], start_jvm: bool = True) -> ConnectionFactory:
        """Build the connection factory; the JVM is started only when JDBC jars are configured."""
        jar_paths = collect_jdbc_jars(database_config)
        if start_jvm and jar_paths:
            initialize_jvm_once(jar_paths)

        factory = ConnectionFactory.from_config(database_config)
        logger.info("Connection factory created successfully")
        return factory


class RepositoryFactory:
    """Factory for creating repository instances."""

    def __init__(self, connection_factory: ConnectionFactory, legacy_config: Dict[str, Any] = None):
        self.connection_factory = connection_factory
        self.legacy_config = legacy_config or {}

    def create_legacy_dao(self) -> LegacyDao:
        """A fresh lifecycle manager; one per logical operation."""
        return LegacyDao(self.connection_factory)

    def create_student_repository(self, kind: Union[str, DatabaseKind, None] = None) -> StudentLegacyRepository:
        """Create the student legacy repository."""
        return StudentLegacyRepository(
            self.create_legacy_dao,
            kind=kind or self.legacy_config.get('default_kind', DatabaseKind.ORACLE),
            test_school_code=str(self.legacy_config.get('test_school_code', DEFAULT_TEST_SCHOOL_CODE)),
            test_name_marker=self.legacy_config.get('test_name_marker', DEFAULT_TEST_NAME_MARKER)
        )
