# student_registry/infrastructure/database/oracle/connection.py
"""
Oracle legacy database connection provider.
"""

import logging

from ....domain.models import DatabaseKind
from ..base_connection import BaseJdbcConnection
from ..connection_manager import OracleConfig

logger = logging.getLogger(__name__)


class OracleDatabaseConnection(BaseJdbcConnection):
    """Oracle connection provider using the thin JDBC driver."""

    kind = DatabaseKind.ORACLE

    def __init__(self, config: OracleConfig):
        driver_class = "oracle.jdbc.OracleDriver"
        super().__init__(config, driver_class, config.url)
        logger.info("Oracle connection provider initialized")

    def get_test_query(self) -> str:
        """Get Oracle-specific test query."""
        return "SELECT 1 FROM DUAL"
