# student_registry/infrastructure/database/base_connection.py
"""
Base connection providers: JDBC (through jaydebeapi) and the shared provider contract.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import jaydebeapi

from ...domain.models import DatabaseKind
from .connection_manager import DatabaseConnectionError, DatabaseConfig, JvmManager
from .handles import ConnectionHandle

logger = logging.getLogger(__name__)


class ConnectionProvider(ABC):
    """Opens connections for one database kind."""

    kind: DatabaseKind = DatabaseKind.DEFAULT

    @abstractmethod
    def open(self) -> ConnectionHandle:
        """Open a new connection; raises DatabaseConnectionError."""
        pass

    @abstractmethod
    def get_test_query(self) -> str:
        """Get test query specific to database type."""
        pass

    def clean_record_data(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Strip string values."""
        cleaned = {}
        for key, value in record.items():
            if isinstance(value, str):
                cleaned[key] = value.strip()
            else:
                cleaned[key] = value
        return cleaned


class BaseJdbcConnection(ConnectionProvider):
    """Base class for JDBC connection providers."""

    def __init__(self, config: DatabaseConfig, driver_class: str, connection_url: Optional[str]):
        self.config = config
        self.driver_class = driver_class
        self.connection_url = connection_url
        self.jvm_manager = JvmManager()

    def _missing_settings(self) -> List[str]:
        missing = []
        if not self.connection_url:
            missing.append("url")
        if not self.config.user:
            missing.append("user")
        if self.config.password is None:
            missing.append("password")
        return missing

    def open(self) -> ConnectionHandle:
        """Create a new raw JDBC connection."""
        missing = self._missing_settings()
        if missing:
            raise DatabaseConnectionError(self.kind, f"Missing connection settings: {', '.join(missing)}")

        if self.config.jdbc_jar_path:
            self.jvm_manager.add_jar_path(self.config.jdbc_jar_path)

        try:
            connection = jaydebeapi.connect(
                self.driver_class,
                self.connection_url,
                [self.config.user, self.config.password],
                self.config.jdbc_jar_path
            )
            logger.debug(f"New {self.__class__.__name__} connection created")
            return ConnectionHandle(connection, self.kind, self.clean_record_data)
        except Exception as e:
            logger.error(f"Failed to create {self.__class__.__name__} connection: {e}")
            raise DatabaseConnectionError(self.kind, cause=e) from e

    def clean_record_data(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Java String objects to Python strings and strip them."""
        cleaned = {}
        for key, value in record.items():
            if value is None:
                cleaned[key] = None
            elif isinstance(value, str):
                cleaned[key] = value.strip()
            elif hasattr(value, 'toString'):
                cleaned[key] = str(value.toString()).strip()
            else:
                cleaned[key] = value
        return cleaned
