# student_registry/infrastructure/database/embedded/connection.py
"""
Embedded default datastore (SQLite), used when no legacy vendor is selected.
"""

import logging
import sqlite3
from pathlib import Path

from ....domain.models import DatabaseKind
from ..base_connection import ConnectionProvider
from ..connection_manager import DatabaseConnectionError, EmbeddedConfig
from ..handles import ConnectionHandle

logger = logging.getLogger(__name__)


class EmbeddedDatabaseConnection(ConnectionProvider):
    """SQLite connection provider for the application's primary datastore."""

    kind = DatabaseKind.DEFAULT

    def __init__(self, config: EmbeddedConfig):
        self.config = config

    def open(self) -> ConnectionHandle:
        try:
            if self.config.path != ":memory:":
                Path(self.config.path).parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(self.config.path)
            logger.debug(f"Embedded datastore opened at {self.config.path}")
            return ConnectionHandle(connection, self.kind, self.clean_record_data, requires_commit=True)
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to open embedded datastore {self.config.path}: {e}")
            raise DatabaseConnectionError(self.kind, cause=e) from e

    def get_test_query(self) -> str:
        return "SELECT 1"
