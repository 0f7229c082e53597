# student_registry/domain/interfaces.py
"""
Domain interfaces for the student registration application.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union

from .models import (
    DatabaseKind, Student, StudentSearchResult, EligibleStudentRecord, StudentRgInfo
)


# Configuration Interface

class ConfigurationProvider(ABC):
    """Interface for configuration management."""

    @abstractmethod
    def get_value(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value."""
        pass

    @abstractmethod
    def get_section(self, section_name: str) -> Dict[str, Any]:
        """Get configuration section."""
        pass

    @abstractmethod
    def has_key(self, key_path: str) -> bool:
        """Check if configuration key exists."""
        pass

    @abstractmethod
    def reload_configuration(self) -> None:
        """Reload configuration from source."""
        pass


# Legacy data access

class LegacyDataAccess(ABC):
    """Procedural JDBC-style access to the legacy databases."""

    @abstractmethod
    def connect(self, kind: Union[str, DatabaseKind, None] = None) -> 'LegacyDataAccess':
        """Open a connection of the given kind, closing any previous one."""
        pass

    @abstractmethod
    def run_query(self, sql: str) -> Any:
        """Execute an ad-hoc query and return its result set."""
        pass

    @abstractmethod
    def prepare_statement(self, sql: str) -> Any:
        """Prepare a query statement."""
        pass

    @abstractmethod
    def prepare_insert(self, sql: str) -> Any:
        """Prepare a write statement."""
        pass

    @abstractmethod
    def prepare_update(self, sql: str) -> Any:
        """Prepare an update statement."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release result set, statement and connection. Never raises."""
        pass


# Repository Interfaces

class StudentLegacyDao(ABC):
    """Repository interface for students in the legacy database."""

    @abstractmethod
    def insert_student(self, student: Student, client_ip: Optional[str], operation_type: Optional[str]) -> int:
        """Insert a student; 1 on success, 0 on failure."""
        pass

    @abstractmethod
    def find_by_setps_code(self, setps_code: str, school_code: Optional[str]) -> Optional[Student]:
        """Load the full student record."""
        pass

    @abstractmethod
    def search_by_name(self, name: Optional[str], birth_date: Optional[str],
                       cpf: Optional[str], mother_name: Optional[str]) -> List[StudentSearchResult]:
        """Multi-criteria search ordered by name."""
        pass

    @abstractmethod
    def general_search(self, rg: Optional[str], certificate_number: Optional[str],
                       birth_registration: Optional[str], cpf: Optional[str],
                       mother_name: Optional[str], name: Optional[str],
                       birth_date: Optional[str]) -> Optional[StudentSearchResult]:
        """First student matching any combination of document filters."""
        pass

    @abstractmethod
    def list_eligible(self, initials: Union[str, Sequence[str], None], school_code: str,
                      validity_year: str, birth_date: Optional[str]) -> List[EligibleStudentRecord]:
        """Eligible students not yet processed in the cycle."""
        pass

    @abstractmethod
    def find_by_rg(self, rg: str, school_code: Optional[str]) -> List[StudentRgInfo]:
        """Students already registered with the RG."""
        pass
