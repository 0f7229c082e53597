# student_registry/infrastructure/database/legacy_dao.py
"""
Resource lifecycle manager for the legacy databases.

One LegacyDao owns at most one connection, one statement and one result set at a time.
It is not thread-safe: use one instance per logical operation. Bound parameter values
are never logged because they carry personal data.
"""

import logging
from enum import Enum
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from ...domain.interfaces import LegacyDataAccess
from ...domain.models import DatabaseKind
from .connection_factory import ConnectionFactory
from .connection_manager import (
    DataAccessError, DatabaseConnectionError, DisconnectError, ExecutionError, StatementPreparationError
)
from .handles import ConnectionHandle, PreparedStatement, ResultSet

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    """Resources currently held by a LegacyDao."""
    IDLE = "idle"
    CONNECTED = "connected"
    PREPARED = "prepared"
    EXECUTED = "executed"


class LegacyDao(LegacyDataAccess):
    """Connection, statement and result-set lifecycle with ordered, idempotent teardown."""

    def __init__(self, connection_factory: ConnectionFactory):
        self.connection_factory = connection_factory
        self._connection: Optional[ConnectionHandle] = None
        self._statement: Optional[PreparedStatement] = None

    @property
    def connection(self) -> Optional[ConnectionHandle]:
        return self._connection

    @property
    def statement(self) -> Optional[PreparedStatement]:
        return self._statement

    @property
    def result_set(self) -> Optional[ResultSet]:
        return self._statement.result_set if self._statement is not None else None

    @property
    def state(self) -> LifecycleState:
        if self._connection is None or self._connection.closed:
            return LifecycleState.IDLE
        if self._statement is None:
            return LifecycleState.CONNECTED
        result_set = self._statement.result_set
        if result_set is not None and not result_set.closed:
            return LifecycleState.EXECUTED
        return LifecycleState.PREPARED

    def connect(self, kind: Union[str, DatabaseKind, None] = None) -> 'LegacyDao':
        """Open a connection of the given kind; a held connection is closed first (best-effort)."""
        if self._connection is not None:
            self._release_statement()
            try:
                self._connection.close()
            except Exception as e:
                logger.warning(f"Error closing existing legacy connection: {e}")
            finally:
                self._connection = None

        try:
            self._connection = self.connection_factory.open(kind)
        except DatabaseConnectionError as e:
            logger.error(f"Could not connect to the database: {e}")
            raise
        except Exception as e:
            resolved = DatabaseKind.from_selector(kind)
            logger.error(f"Unexpected error while connecting to {resolved.value}: {e}")
            raise DatabaseConnectionError(resolved, cause=e) from e

        return self

    def _ensure_connection(self) -> ConnectionHandle:
        if self._connection is None or self._connection.closed:
            logger.info("No open legacy connection, connecting to the default datastore")
            self.connect(DatabaseKind.DEFAULT)
        return self._connection

    def _release_statement(self) -> None:
        if self._statement is None:
            return
        try:
            self._statement.close()
        except Exception as e:
            logger.warning(f"Error closing superseded statement: {e}")
        finally:
            self._statement = None

    def _prepare(self, sql: str, operation: str) -> PreparedStatement:
        connection = self._ensure_connection()
        self._release_statement()
        try:
            self._statement = PreparedStatement(connection, sql)
        except DataAccessError as e:
            raise StatementPreparationError(operation, "Error preparing the query", e) from e
        except Exception as e:
            logger.error(f"{operation} failed on {connection.kind.value}: {e}")
            logger.debug(f"{operation} SQL: {sql}")
            raise StatementPreparationError(operation, "Error preparing the query", e) from e
        return self._statement

    def run_query(self, sql: str) -> ResultSet:
        """Execute an ad-hoc query; connects to the default datastore when idle."""
        statement = self._prepare(sql, "run_query")
        try:
            return statement.execute_query()
        except ExecutionError as e:
            logger.error(f"run_query failed on {statement.connection.kind.value}: {e.cause}")
            logger.debug(f"run_query SQL: {sql}")
            raise

    def prepare_statement(self, sql: str) -> PreparedStatement:
        """Prepare a query; connects to the default datastore when idle."""
        return self._prepare(sql, "prepare_statement")

    def prepare_insert(self, sql: str) -> PreparedStatement:
        """Prepare a write statement."""
        logger.debug("Preparing write statement")
        return self._prepare(sql, "prepare_insert")

    def prepare_update(self, sql: str) -> PreparedStatement:
        """Alias of prepare_insert; both share one preparation path."""
        return self.prepare_insert(sql)

    def disconnect(self) -> None:
        """Close result set, statement and connection in that order. Safe to call repeatedly."""
        statement, self._statement = self._statement, None
        connection, self._connection = self._connection, None

        if statement is not None:
            if statement.result_set is not None:
                statement.result_set.close()
            try:
                statement.close()
            except Exception as e:
                logger.error(str(DisconnectError("disconnect", "Error closing statement", e)))

        if connection is not None:
            try:
                connection.close()
            except Exception as e:
                logger.error(str(DisconnectError("disconnect", "Error closing connection", e)))

    @contextmanager
    def session(self, kind: Union[str, DatabaseKind, None] = None) -> Iterator['LegacyDao']:
        """Connect, yield, and always disconnect."""
        try:
            self.connect(kind)
            yield self
        finally:
            self.disconnect()

    def __enter__(self) -> 'LegacyDao':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()
