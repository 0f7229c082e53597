# student_registry/infrastructure/database/sqlserver/connection.py
"""
SQL Server legacy database connection provider.
"""

import logging
from typing import Optional

from ....domain.models import DatabaseKind
from ..base_connection import BaseJdbcConnection
from ..connection_manager import SqlServerConfig

logger = logging.getLogger(__name__)


def build_sqlserver_url(config: SqlServerConfig) -> Optional[str]:
    """JDBC URL from server name, port and catalog; None without a server name."""
    if not config.server:
        return None

    url = f"jdbc:sqlserver://{config.server}:{config.port}"
    if config.database:
        url += f";databaseName={config.database}"
    url += f";encrypt={'true' if config.encrypt else 'false'}"
    url += f";loginTimeout={config.connection_timeout}"
    return url


class SqlServerDatabaseConnection(BaseJdbcConnection):
    """SQL Server connection provider."""

    kind = DatabaseKind.SQLSERVER

    def __init__(self, config: SqlServerConfig):
        driver_class = "com.microsoft.sqlserver.jdbc.SQLServerDriver"
        super().__init__(config, driver_class, build_sqlserver_url(config))
        logger.info(f"SQL Server connection provider initialized for {config.server}")

    def get_test_query(self) -> str:
        """Get SQL Server-specific test query."""
        return "SELECT 1"
