"""Tests for the sentinel-returning student service."""

import logging
from datetime import date
from unittest.mock import MagicMock

import pytest

from student_registry.application.services.student_service import LOOKUP_FAILED, StudentService
from student_registry.domain.models import DatabaseKind, EligibleStudentRecord, Student
from student_registry.infrastructure.database import DatabaseConnectionError, ExecutionError
from student_registry.infrastructure.database.legacy_dao import LegacyDao
from student_registry.infrastructure.repositories.legacy.student_repository import StudentLegacyRepository


@pytest.fixture
def repository():
    return MagicMock(spec=StudentLegacyRepository)


@pytest.fixture
def service(repository):
    return StudentService(repository)


def execution_error():
    return ExecutionError("execute_query", "Error executing statement against the database", RuntimeError("ORA"))


class TestSentinels:
    def test_insert_failure_returns_zero(self, service, repository, caplog):
        repository.insert_student.side_effect = DatabaseConnectionError(DatabaseKind.ORACLE)

        with caplog.at_level(logging.ERROR):
            assert service.insert_student(Student(name="ANA")) == 0

        assert "insert_student failed" in caplog.text
        assert service.statistics.failed_operations == 1

    def test_insert_success(self, service, repository):
        repository.insert_student.return_value = 1

        assert service.insert_student(Student(name="ANA"), "10.0.0.1", "I") == 1
        repository.insert_student.assert_called_once()
        assert service.statistics.inserted_students == 1

    def test_lookup_failure_returns_minus_one(self, service, repository):
        repository.find_by_setps_code.side_effect = execution_error()
        assert service.get_student_by_setps_code("4711", "1234") == LOOKUP_FAILED == "-1"

    def test_lookup_invalid_code_returns_minus_one(self, service, repository):
        repository.find_by_setps_code.side_effect = ValueError("Invalid SETPS code")
        assert service.get_student_by_setps_code("abc", None) == "-1"

    def test_lookup_not_found_is_none(self, service, repository):
        repository.find_by_setps_code.return_value = None
        assert service.get_student_by_setps_code("4711", None) is None

    @pytest.mark.parametrize("method,args", [
        ("search_by_name", ("Silva",)),
        ("list_eligible", ("A", "1234", "2024")),
        ("list_sent", ("1234", "2024")),
        ("list_excluded", ("1234", "2024")),
        ("find_by_rg", ("MG123",)),
    ])
    def test_listing_failures_return_empty(self, service, repository, method, args):
        getattr(repository, method).side_effect = execution_error()
        assert getattr(service, method)(*args) == []

    def test_general_search_failure_returns_none(self, service, repository):
        repository.general_search.side_effect = execution_error()
        assert service.general_search(rg="MG123") is None

    def test_exclude_failure_returns_zero(self, service, repository):
        repository.exclude_student.side_effect = execution_error()
        assert service.exclude_student("4711", "1234", "2024") == 0

    def test_unexpected_errors_propagate(self, service, repository):
        repository.search_by_name.side_effect = KeyError("bug")
        with pytest.raises(KeyError):
            service.search_by_name("Silva")


class TestPassThrough:
    def test_list_eligible_arguments(self, service, repository):
        record = EligibleStudentRecord("10", "M1", "ANA", "01/01/2012")
        repository.list_eligible.return_value = [record]

        assert service.list_eligible("A,B", "1234", "2024") == [record]
        repository.list_eligible.assert_called_once_with("A,B", "1234", "2024", None)

    def test_general_search_argument_order(self, service, repository):
        service.general_search(rg="R", certificate_number="C", birth_registration="M", cpf="X",
                               mother_name="MAE", name="NOME", birth_date="01/01/2012")

        repository.general_search.assert_called_once_with("R", "C", "M", "X", "MAE", "NOME", "01/01/2012")

    def test_validation_helpers(self):
        assert StudentService.verify_cpf("12345678901") is True
        assert StudentService.verify_cpf("11111111111") is False
        assert StudentService.verify_date("15/03/2010", date(2024, 1, 1)) == 1
        assert StudentService.verify_date("15/03/2023", date(2024, 1, 1)) == 0


class TestWithLegacyDatabase:
    def test_connection_failure_degrades_to_empty(self, connection_factory, providers):
        providers[DatabaseKind.ORACLE].open_error = OSError("listener down")
        service = StudentService(StudentLegacyRepository(lambda: LegacyDao(connection_factory)))

        assert service.search_by_name("Silva") == []
        assert service.get_student_by_setps_code("1", None) == "-1"
        assert service.insert_student(Student(name="ANA"), None, None) == 0
