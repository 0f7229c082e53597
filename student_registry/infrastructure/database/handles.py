# student_registry/infrastructure/database/handles.py
"""
DB-API resource wrappers with JDBC-style semantics: connection, prepared statement and result set.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence
from dataclasses import dataclass

from ...domain.models import DatabaseKind
from .connection_manager import DataAccessError, ExecutionError

logger = logging.getLogger(__name__)

RecordCleaner = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class SqlNull:
    """Typed NULL parameter, bound as None at execution time."""
    sql_type: str = "VARCHAR"


class ConnectionHandle:
    """Live connection owned by a single LegacyDao."""

    def __init__(self, raw_connection: Any, kind: DatabaseKind,
                 record_cleaner: Optional[RecordCleaner] = None, requires_commit: bool = False):
        self.raw = raw_connection
        self.kind = kind
        self.requires_commit = requires_commit
        self._record_cleaner = record_cleaner
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def cursor(self) -> Any:
        if self._closed:
            raise DataAccessError("cursor", f"Connection [{self.kind.value}] is closed")
        return self.raw.cursor()

    def commit(self) -> None:
        """Commit when the driver does not auto-commit."""
        if self.requires_commit and not self._closed:
            self.raw.commit()

    def clean_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._record_cleaner(record) if self._record_cleaner else record

    def close(self) -> None:
        """Close the driver connection; the handle is invalid afterwards even if closing fails."""
        if self._closed:
            return
        try:
            self.raw.close()
        finally:
            self._closed = True

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"ConnectionHandle(kind={self.kind.value}, {state})"


class ResultSet:
    """Rows produced by a statement execution, as dicts keyed by lower-cased column name."""

    def __init__(self, cursor: Any, record_cleaner: Optional[RecordCleaner] = None):
        self._cursor = cursor
        self._record_cleaner = record_cleaner
        self._columns = [column[0].lower() for column in (cursor.description or [])]
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def _to_record(self, row: Sequence[Any]) -> Dict[str, Any]:
        record = dict(zip(self._columns, row))
        return self._record_cleaner(record) if self._record_cleaner else record

    def fetchone(self) -> Optional[Dict[str, Any]]:
        """Next row, or None when exhausted or closed."""
        if self._closed:
            return None
        row = self._cursor.fetchone()
        return self._to_record(row) if row is not None else None

    def fetchall(self) -> List[Dict[str, Any]]:
        if self._closed:
            return []
        return [self._to_record(row) for row in self._cursor.fetchall()]

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        while True:
            record = self.fetchone()
            if record is None:
                return
            yield record

    def close(self) -> None:
        # Rows belong to the statement cursor, which the statement closes.
        self._closed = True


class PreparedStatement:
    """Statement bound to one connection with 1-based positional parameters."""

    def __init__(self, connection: ConnectionHandle, sql: str):
        self.connection = connection
        self.sql = sql
        self.result_set: Optional[ResultSet] = None
        self._cursor = connection.cursor()
        self._parameters: Dict[int, Any] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def set_parameter(self, index: int, value: Any) -> None:
        if index < 1:
            raise ValueError(f"Parameter index must start at 1, got {index}")
        self._parameters[index] = value

    def set_null(self, index: int, sql_type: str) -> None:
        self.set_parameter(index, SqlNull(sql_type))

    def set_parameters(self, values: Sequence[Any]) -> None:
        """Replace all parameters with values in order."""
        self._parameters.clear()
        for index, value in enumerate(values, start=1):
            self._parameters[index] = value

    @property
    def parameters(self) -> List[Any]:
        """Bound parameters in index order."""
        count = len(self._parameters)
        missing = [index for index in range(1, count + 1) if index not in self._parameters]
        if missing:
            raise ValueError(f"Parameters not bound at positions {missing}")
        return [self._parameters[index] for index in range(1, count + 1)]

    def _bind_values(self) -> List[Any]:
        return [None if isinstance(value, SqlNull) else value for value in self.parameters]

    def _execute(self, operation: str) -> None:
        if self._closed:
            raise ExecutionError(operation, "Statement is closed")

        values = self._bind_values()
        logger.debug(f"{operation} on {self.connection.kind.value} with {len(values)} parameter(s): {self.sql}")
        try:
            if values:
                self._cursor.execute(self.sql, values)
            else:
                self._cursor.execute(self.sql)
        except Exception as e:
            raise ExecutionError(operation, "Error executing statement against the database", e) from e

    def execute_query(self) -> ResultSet:
        """Execute and return the result set."""
        if self.result_set is not None:
            self.result_set.close()
        self._execute("execute_query")
        self.result_set = ResultSet(self._cursor, self.connection.clean_record)
        return self.result_set

    def execute_update(self) -> int:
        """Execute a write and return the affected row count."""
        self._execute("execute_update")
        try:
            self.connection.commit()
        except Exception as e:
            raise ExecutionError("execute_update", "Error committing statement", e) from e
        return self._cursor.rowcount

    def close(self) -> None:
        """Close the result set, then the cursor."""
        if self._closed:
            return
        if self.result_set is not None:
            self.result_set.close()
            self.result_set = None
        try:
            self._cursor.close()
        finally:
            self._closed = True
