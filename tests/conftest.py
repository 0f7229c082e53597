"""
Shared pytest fixtures for the student registry tests.

The legacy databases are replaced by scripted in-memory DB-API fakes:

- FakeDatabase holds the scripted results and records every execution
- FakeConnection / FakeCursor implement the DB-API surface the handles use
- FakeProvider plugs a FakeDatabase into the ConnectionFactory

No JVM and no real legacy database is needed.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from student_registry.domain.models import DatabaseKind
from student_registry.infrastructure.database.base_connection import ConnectionProvider
from student_registry.infrastructure.database.connection_factory import ConnectionFactory
from student_registry.infrastructure.database.connection_manager import DatabaseConnectionError
from student_registry.infrastructure.database.handles import ConnectionHandle
from student_registry.infrastructure.database.legacy_dao import LegacyDao


class FakeDatabase:
    """Scripted results consumed one per execute, shared by every connection."""

    def __init__(self):
        self.results: List[Tuple[Sequence[str], List[Sequence[Any]]]] = []
        self.executed: List[Tuple[str, List[Any]]] = []
        self.events: List[str] = []
        self.connections: List['FakeConnection'] = []
        self.rowcount = 1
        self.execute_error: Optional[Exception] = None
        self.cursor_close_error: Optional[Exception] = None
        self.connection_close_error: Optional[Exception] = None

    def add_result(self, columns: Sequence[str], rows: List[Sequence[Any]]) -> None:
        self.results.append((columns, rows))

    @property
    def last_sql(self) -> str:
        return self.executed[-1][0]

    @property
    def last_params(self) -> List[Any]:
        return self.executed[-1][1]


class FakeCursor:
    def __init__(self, database: FakeDatabase, connection_id: int):
        self.database = database
        self.connection_id = connection_id
        self.description = None
        self.rowcount = -1
        self.closed = False
        self._rows: List[Sequence[Any]] = []

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> None:
        self.database.executed.append((sql, list(params) if params is not None else []))
        if self.database.execute_error is not None:
            raise self.database.execute_error

        if self.database.results:
            columns, rows = self.database.results.pop(0)
            self.description = [(column.upper(), None) for column in columns]
            self._rows = list(rows)
        else:
            self.description = []
            self._rows = []
        self.rowcount = self.database.rowcount

    def fetchone(self) -> Optional[Sequence[Any]]:
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> List[Sequence[Any]]:
        rows, self._rows = self._rows, []
        return rows

    def close(self) -> None:
        self.database.events.append(f"cursor.close#{self.connection_id}")
        self.closed = True
        if self.database.cursor_close_error is not None:
            raise self.database.cursor_close_error


class FakeConnection:
    def __init__(self, database: FakeDatabase, connection_id: int):
        self.database = database
        self.connection_id = connection_id
        self.close_calls = 0
        self.commits = 0
        self.cursors: List[FakeCursor] = []

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self.database, self.connection_id)
        self.cursors.append(cursor)
        return cursor

    def commit(self) -> None:
        self.commits += 1
        self.database.events.append(f"commit#{self.connection_id}")

    def close(self) -> None:
        self.close_calls += 1
        self.database.events.append(f"connection.close#{self.connection_id}")
        if self.database.connection_close_error is not None:
            raise self.database.connection_close_error


class FakeProvider(ConnectionProvider):
    """Connection provider backed by a FakeDatabase."""

    def __init__(self, kind: DatabaseKind, database: FakeDatabase, requires_commit: bool = False):
        self.kind = kind
        self.database = database
        self.requires_commit = requires_commit
        self.open_error: Optional[Exception] = None
        self.opened = 0

    def open(self) -> ConnectionHandle:
        if self.open_error is not None:
            raise DatabaseConnectionError(self.kind, cause=self.open_error)
        self.opened += 1
        connection = FakeConnection(self.database, len(self.database.connections) + 1)
        self.database.connections.append(connection)
        return ConnectionHandle(connection, self.kind, self.clean_record_data, self.requires_commit)

    def get_test_query(self) -> str:
        return "SELECT 1 FROM DUAL" if self.kind == DatabaseKind.ORACLE else "SELECT 1"


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def providers(fake_db: FakeDatabase) -> Dict[DatabaseKind, FakeProvider]:
    return {
        DatabaseKind.ORACLE: FakeProvider(DatabaseKind.ORACLE, fake_db),
        DatabaseKind.SQLSERVER: FakeProvider(DatabaseKind.SQLSERVER, fake_db),
        DatabaseKind.DEFAULT: FakeProvider(DatabaseKind.DEFAULT, fake_db, requires_commit=True),
    }


@pytest.fixture
def connection_factory(providers: Dict[DatabaseKind, FakeProvider]) -> ConnectionFactory:
    return ConnectionFactory(providers)


@pytest.fixture
def dao(connection_factory: ConnectionFactory) -> LegacyDao:
    legacy_dao = LegacyDao(connection_factory)
    yield legacy_dao
    legacy_dao.disconnect()
