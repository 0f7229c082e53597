# student_registry/domain/validators/cpf_validator.py
"""
CPF (taxpayer number) validator.

Only the format is checked: exactly 11 digits, not all identical.
The check-digit algorithm is not applied.
"""

import re
import logging
from typing import Optional

from ..models import ValidationResult
from .base_validator import BaseValidator

logger = logging.getLogger(__name__)

_CPF_PATTERN = re.compile(r'[0-9]{11}')
_REPEATED_DIGITS = re.compile(r'([0-9])\1{10}')


def verify_cpf(cpf: Optional[str]) -> bool:
    """Return True for 11 digits that are not all the same digit."""
    if cpf is None or not _CPF_PATTERN.fullmatch(cpf):
        return False
    return not _REPEATED_DIGITS.fullmatch(cpf)


class CpfValidator(BaseValidator[Optional[str]]):
    """Validator for CPF values received from the API layer."""

    def _perform_validation(self, cpf: Optional[str]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        if cpf is None or not cpf.strip():
            result.add_error("CPF is required")
            return result

        if not _CPF_PATTERN.fullmatch(cpf):
            result.add_error(f"CPF must contain exactly 11 digits without punctuation (got {len(cpf)} characters)")
            return result

        if _REPEATED_DIGITS.fullmatch(cpf):
            result.add_error("CPF cannot be a single repeated digit")
            return result

        return result
