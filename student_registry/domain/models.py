# student_registry/domain/models.py
"""
Core domain models for the student registration application.
"""

import logging
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass, field
from datetime import date

from .normalization import normalize, normalize_upper, upper_or_none

logger = logging.getLogger(__name__)

LEGACY_DATE_FORMAT = "%d/%m/%Y"


class DatabaseKind(Enum):
    """Database vendor selector."""
    ORACLE = "oracle"
    SQLSERVER = "sqlserver"
    DEFAULT = "default"

    @classmethod
    def from_selector(cls, selector: Optional[object]) -> 'DatabaseKind':
        """Resolve a selector string; empty or unrecognized values fall back to DEFAULT."""
        if isinstance(selector, DatabaseKind):
            return selector

        text = str(selector).strip().lower() if selector is not None else ""
        if not text:
            return cls.DEFAULT

        for kind in (cls.ORACLE, cls.SQLSERVER):
            if kind.value == text:
                return kind

        if text != cls.DEFAULT.value:
            logger.warning(f"Unsupported database kind '{selector}', falling back to default datastore")
        return cls.DEFAULT


@dataclass
class Address:
    """Student home address as stored in the legacy dependents table."""
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    district: Optional[str] = None
    zip_code: Optional[str] = None
    city: Optional[str] = None


@dataclass
class Identity:
    """Identity document; RG, CPF and issuing authority are normalized on every write."""
    cpf: Optional[str] = None
    rg: Optional[str] = None
    issue_date: Optional[date] = None
    issuing_authority: Optional[str] = None

    def __setattr__(self, name, value):
        if name in ('cpf', 'rg'):
            value = normalize(value)
        elif name == 'issuing_authority':
            value = normalize_upper(value)
        super().__setattr__(name, value)


@dataclass
class BirthCertificate:
    """Birth certificate; every field is upper-cased on write."""
    number: Optional[str] = None
    book: Optional[str] = None
    sheet: Optional[str] = None
    birth_registration: Optional[str] = None

    def __setattr__(self, name, value):
        super().__setattr__(name, upper_or_none(value))

    def is_complete(self) -> bool:
        """Number, book and sheet are all filled."""
        return all([self.number, self.book, self.sheet])


@dataclass
class Document:
    """Student documents."""
    identity: Identity = field(default_factory=Identity)
    certificate: BirthCertificate = field(default_factory=BirthCertificate)


@dataclass
class Student:
    """Full student record from the legacy dependents schema."""
    setps_code: Optional[str] = None
    name: Optional[str] = None
    sex: Optional[str] = None
    mother_name: Optional[str] = None
    father_name: Optional[str] = None
    birth_date: Optional[str] = None  # dd/mm/yyyy, never parsed
    phone: Optional[str] = None
    email: Optional[str] = None
    enrollment: Optional[str] = None
    grade: Optional[str] = None
    series: Optional[str] = None
    shift: Optional[str] = None
    school_code: Optional[str] = None
    validity_year: Optional[str] = None
    address: Address = field(default_factory=Address)
    document: Document = field(default_factory=Document)


@dataclass(frozen=True)
class StudentSearchResult:
    """Projection returned by name and general searches."""
    setps_code: Optional[str]
    name: Optional[str]
    birth_date: Optional[str]
    mother_name: Optional[str] = None
    cpf: Optional[str] = None
    rg: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class EligibleStudentRecord:
    """Projection of a row in the eligible ("apto") listing."""
    setps_code: Optional[str]
    enrollment: Optional[str]
    name: Optional[str]
    birth_date: Optional[str]


@dataclass(frozen=True)
class StudentRgInfo:
    """Students already registered with a given RG."""
    setps_code: int
    enrollment: Optional[str]
    name: Optional[str]
    birth_date: Optional[str]


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning."""
        self.warnings.append(warning)

    def has_issues(self) -> bool:
        """Check if there are any errors or warnings."""
        return bool(self.errors or self.warnings)
