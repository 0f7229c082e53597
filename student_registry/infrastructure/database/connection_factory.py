# student_registry/infrastructure/database/connection_factory.py
"""
Connection factory: maps a database kind selector to a vendor connection provider.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from ...domain.models import DatabaseKind
from .base_connection import ConnectionProvider
from .connection_manager import (
    DatabaseConnectionError, EmbeddedConfig, OracleConfig, SqlServerConfig
)
from .embedded.connection import EmbeddedDatabaseConnection
from .handles import ConnectionHandle
from .oracle.connection import OracleDatabaseConnection
from .sqlserver.connection import SqlServerDatabaseConnection

logger = logging.getLogger(__name__)


class ConnectionFactory:
    """Opens connections by database kind; empty or unknown kinds use the default datastore."""

    def __init__(self, providers: Mapping[DatabaseKind, ConnectionProvider]):
        if DatabaseKind.DEFAULT not in providers:
            raise ValueError("A default connection provider is required")
        self._providers: Dict[DatabaseKind, ConnectionProvider] = dict(providers)

    @classmethod
    def from_config(cls, database_config: Dict[str, Any]) -> 'ConnectionFactory':
        """Build providers from the 'database' configuration section."""
        oracle_section = database_config.get('oracle') or {}
        sqlserver_section = database_config.get('sqlserver') or {}
        default_section = database_config.get('default') or {}

        providers = {
            DatabaseKind.ORACLE: OracleDatabaseConnection(OracleConfig(
                url=oracle_section.get('url'),
                user=oracle_section.get('user'),
                password=oracle_section.get('password'),
                jdbc_jar_path=oracle_section.get('jdbc_jar_path'),
                connection_timeout=oracle_section.get('connection_timeout', 30)
            )),
            DatabaseKind.SQLSERVER: SqlServerDatabaseConnection(SqlServerConfig(
                server=sqlserver_section.get('server'),
                port=int(sqlserver_section.get('port', 1433)),
                database=sqlserver_section.get('database'),
                user=sqlserver_section.get('user'),
                password=sqlserver_section.get('password'),
                jdbc_jar_path=sqlserver_section.get('jdbc_jar_path'),
                encrypt=bool(sqlserver_section.get('encrypt', False)),
                connection_timeout=sqlserver_section.get('connection_timeout', 30)
            )),
            DatabaseKind.DEFAULT: EmbeddedDatabaseConnection(EmbeddedConfig(
                path=default_section.get('path', ':memory:')
            ))
        }
        return cls(providers)

    def get_provider(self, kind: Union[str, DatabaseKind, None]) -> ConnectionProvider:
        resolved = DatabaseKind.from_selector(kind)
        provider = self._providers.get(resolved)
        if provider is None:
            logger.warning(f"No provider configured for {resolved.value}, using default datastore")
            provider = self._providers[DatabaseKind.DEFAULT]
        return provider

    def open(self, kind: Union[str, DatabaseKind, None] = None) -> ConnectionHandle:
        """Open a live connection; raises DatabaseConnectionError. Never retries."""
        provider = self.get_provider(kind)
        handle = provider.open()
        logger.info(f"Connected to {provider.kind.value} database")
        return handle

    def test_connection(self, kind: Union[str, DatabaseKind, None] = None) -> bool:
        """Test if a connection of the given kind is working."""
        provider = self.get_provider(kind)
        handle: Optional[ConnectionHandle] = None
        cursor = None
        try:
            handle = provider.open()
            cursor = handle.cursor()
            cursor.execute(provider.get_test_query())
            cursor.fetchall()
            return True
        except DatabaseConnectionError as e:
            logger.error(f"Connection test failed: {e}")
            return False
        except Exception as e:
            logger.error(f"Connection test query failed for {provider.kind.value}: {e}")
            return False
        finally:
            if cursor is not None:
                try:
                    cursor.close()
                except Exception as e:
                    logger.warning(f"Error closing cursor: {e}")
            if handle is not None:
                try:
                    handle.close()
                except Exception as e:
                    logger.warning(f"Error closing connection: {e}")
