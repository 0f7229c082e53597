# student_registry/application/services/student_service.py
"""
Student service for legacy callers.

Repository failures never reach the caller: they are logged and converted into the
sentinel values the legacy contract expects (0 for writes, "-1" for a SETPS lookup,
an empty list for listings and None for single-record searches).
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Union

from ...domain.interfaces import StudentLegacyDao
from ...domain.models import EligibleStudentRecord, Student, StudentRgInfo, StudentSearchResult
from ...domain.validators import verify_cpf, verify_date
from ...infrastructure.database.connection_manager import DataAccessError

logger = logging.getLogger(__name__)

LOOKUP_FAILED = "-1"


@dataclass
class StudentServiceStatistics:
    """Counters for the operations served."""
    total_operations: int = 0
    failed_operations: int = 0
    inserted_students: int = 0


class StudentService:
    """Sentinel-returning facade over the student legacy repository."""

    def __init__(self, repository: StudentLegacyDao):
        self.repository = repository
        self.statistics = StudentServiceStatistics()

    def _failed(self, operation: str, error: Exception) -> None:
        self.statistics.failed_operations += 1
        if isinstance(error, DataAccessError):
            logger.error(f"{operation} failed: {error}")
        else:
            logger.error(f"{operation} failed with invalid input: {error}")

    def insert_student(self, student: Student, client_ip: Optional[str] = None,
                       operation_type: Optional[str] = None) -> int:
        """1 when the student was inserted, 0 otherwise."""
        self.statistics.total_operations += 1
        try:
            inserted = self.repository.insert_student(student, client_ip, operation_type)
        except (DataAccessError, ValueError) as e:
            self._failed("insert_student", e)
            return 0

        self.statistics.inserted_students += inserted
        return inserted

    def get_student_by_setps_code(self, setps_code: Union[str, int],
                                  school_code: Optional[str]) -> Union[Student, str, None]:
        """
        Full student record for a SETPS code.

        Returns None when no student matches and "-1" when the lookup failed.
        """
        self.statistics.total_operations += 1
        try:
            return self.repository.find_by_setps_code(setps_code, school_code)
        except (DataAccessError, ValueError) as e:
            self._failed("find_by_setps_code", e)
            return LOOKUP_FAILED

    def search_by_name(self, name: Optional[str] = None, birth_date: Optional[str] = None,
                       cpf: Optional[str] = None, mother_name: Optional[str] = None) -> List[StudentSearchResult]:
        self.statistics.total_operations += 1
        try:
            return self.repository.search_by_name(name, birth_date, cpf, mother_name)
        except DataAccessError as e:
            self._failed("search_by_name", e)
            return []

    def general_search(self, rg: Optional[str] = None, certificate_number: Optional[str] = None,
                       birth_registration: Optional[str] = None, cpf: Optional[str] = None,
                       mother_name: Optional[str] = None, name: Optional[str] = None,
                       birth_date: Optional[str] = None) -> Optional[StudentSearchResult]:
        self.statistics.total_operations += 1
        try:
            return self.repository.general_search(
                rg, certificate_number, birth_registration, cpf, mother_name, name, birth_date
            )
        except DataAccessError as e:
            self._failed("general_search", e)
            return None

    def list_eligible(self, initials: Union[str, Sequence[str], None], school_code: str,
                      validity_year: str, birth_date: Optional[str] = None) -> List[EligibleStudentRecord]:
        self.statistics.total_operations += 1
        try:
            return self.repository.list_eligible(initials, school_code, validity_year, birth_date)
        except DataAccessError as e:
            self._failed("list_eligible", e)
            return []

    def list_sent(self, school_code: str, validity_year: str,
                  setps_codes: Union[str, Sequence[str], None] = None) -> List[EligibleStudentRecord]:
        self.statistics.total_operations += 1
        try:
            return self.repository.list_sent(school_code, validity_year, setps_codes)
        except DataAccessError as e:
            self._failed("list_sent", e)
            return []

    def list_excluded(self, school_code: str, validity_year: str,
                      setps_codes: Union[str, Sequence[str], None] = None) -> List[EligibleStudentRecord]:
        self.statistics.total_operations += 1
        try:
            return self.repository.list_excluded(school_code, validity_year, setps_codes)
        except DataAccessError as e:
            self._failed("list_excluded", e)
            return []

    def exclude_student(self, setps_code: Union[str, int], school_code: str, validity_year: str) -> int:
        self.statistics.total_operations += 1
        try:
            return self.repository.exclude_student(setps_code, school_code, validity_year)
        except (DataAccessError, ValueError) as e:
            self._failed("exclude_student", e)
            return 0

    def find_by_rg(self, rg: str, school_code: Optional[str] = None) -> List[StudentRgInfo]:
        self.statistics.total_operations += 1
        try:
            return self.repository.find_by_rg(rg, school_code)
        except DataAccessError as e:
            self._failed("find_by_rg", e)
            return []

    @staticmethod
    def verify_date(text: Optional[str], today: Optional[date] = None) -> int:
        """1 for a plausible dd/mm/yyyy birth date, 0 otherwise."""
        return verify_date(text, today)

    @staticmethod
    def verify_cpf(cpf: Optional[str]) -> bool:
        return verify_cpf(cpf)
