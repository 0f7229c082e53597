# student_registry/infrastructure/database/connection_manager.py
"""
Database configuration, data-access errors and JVM management for the legacy databases.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from ...domain.models import DatabaseKind

logger = logging.getLogger(__name__)


@dataclass(kw_only=True)
class DatabaseConfig:
    """Base JDBC configuration."""
    user: Optional[str] = None
    password: Optional[str] = None
    jdbc_jar_path: Optional[str] = None
    connection_timeout: int = 30


@dataclass(kw_only=True)
class OracleConfig(DatabaseConfig):
    """Oracle configuration; the JDBC URL is supplied whole."""
    url: Optional[str] = None


@dataclass(kw_only=True)
class SqlServerConfig(DatabaseConfig):
    """SQL Server configuration built from host, port and catalog."""
    server: Optional[str] = None
    port: int = 1433
    database: Optional[str] = None
    encrypt: bool = False


@dataclass
class EmbeddedConfig:
    """Application's own embedded datastore."""
    path: str = ":memory:"


class DataAccessError(Exception):
    """Uniform error raised by the legacy data-access layer."""

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.operation = operation
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.operation}: {self.message} ({self.cause})"
        return f"{self.operation}: {self.message}"


class DatabaseConnectionError(DataAccessError):
    """Failure to establish a connection for a database kind."""

    def __init__(self, kind: DatabaseKind, message: str = "Could not connect to the database",
                 cause: Optional[BaseException] = None):
        super().__init__("connect", f"{message} [{kind.value}]", cause)
        self.kind = kind


class StatementPreparationError(DataAccessError):
    """Failure to prepare a statement on an open connection."""
    pass


class ExecutionError(DataAccessError):
    """Failure while executing a query or update."""
    pass


class DisconnectError(DataAccessError):
    """Failure during teardown; logged, never propagated."""
    pass


class JvmManager:
    """Singleton JVM manager for JDBC connections."""

    _instance = None
    _jvm_started = False
    _jar_paths = set()

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def add_jar_path(self, jar_path: str) -> None:
        """Add JAR path to classpath."""
        if jar_path:
            self._jar_paths.add(jar_path)

    @property
    def jar_paths(self) -> list:
        return sorted(self._jar_paths)

    def start_jvm(self) -> None:
        """Start JVM with accumulated JAR paths."""
        if self._jvm_started:
            return

        try:
            import jpype

            if not jpype.isJVMStarted():
                jvm_args = []
                if self._jar_paths:
                    jvm_args.append(f"-Djava.class.path={':'.join(self.jar_paths)}")

                jvm_args.extend([
                    "-Xms128m",
                    "-Xmx512m",
                    "-Dfile.encoding=UTF-8"
                ])

                jpype.startJVM(jpype.getDefaultJVMPath(), *jvm_args)
                logger.info("JVM started successfully")

            JvmManager._jvm_started = True

        except Exception as e:
            logger.error(f"Failed to start JVM: {e}")
            raise DataAccessError("start_jvm", "JVM startup failed", e) from e

    def shutdown_jvm(self) -> None:
        """Shutdown JVM."""
        try:
            import jpype
            if jpype.isJVMStarted():
                jpype.shutdownJVM()
                JvmManager._jvm_started = False
                logger.info("JVM shutdown successfully")
        except Exception as e:
            logger.warning(f"Error during JVM shutdown: {e}")
