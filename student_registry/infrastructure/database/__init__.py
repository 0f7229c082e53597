"""
Legacy database access: connection providers, resource lifecycle and errors.
"""

from .connection_manager import (
    DataAccessError, DatabaseConnectionError, StatementPreparationError, ExecutionError, DisconnectError
)
from .connection_factory import ConnectionFactory
from .handles import ConnectionHandle, PreparedStatement, ResultSet, SqlNull
from .legacy_dao import LegacyDao, LifecycleState

__all__ = [
    'DataAccessError',
    'DatabaseConnectionError',
    'StatementPreparationError',
    'ExecutionError',
    'DisconnectError',
    'ConnectionFactory',
    'ConnectionHandle',
    'PreparedStatement',
    'ResultSet',
    'SqlNull',
    'LegacyDao',
    'LifecycleState'
]
