# student_registry/domain/validators/date_validator.py
"""
Birth date validator for dd/mm/yyyy strings.
"""

import re
import logging
from datetime import date
from typing import Optional

from ..models import ValidationResult
from .base_validator import BaseValidator, ValidationConfig

logger = logging.getLogger(__name__)

MIN_YEAR = 1800
MAX_YEAR = 2050
MIN_AGE_YEARS = 5

_DATE_PART = re.compile(r'[0-9]{1,4}')


def verify_date(text: Optional[str], today: Optional[date] = None) -> int:
    """Legacy date check: 1 when valid, 0 otherwise. Never raises."""
    if text is None or len(text) != 10:
        return 0

    parts = text.split('/')
    if len(parts) != 3 or not all(_DATE_PART.fullmatch(part) for part in parts):
        logger.debug("Rejected date not in dd/mm/yyyy form")
        return 0
    day, month, year = (int(part) for part in parts)

    if not (1 <= day <= 31) or not (1 <= month <= 12) or not (MIN_YEAR <= year <= MAX_YEAR):
        return 0

    current_year = (today or date.today()).year
    if current_year - year < MIN_AGE_YEARS:
        return 0

    return 1


class BirthDateValidator(BaseValidator[Optional[str]]):
    """Validator wrapping verify_date with descriptive errors."""

    def __init__(self, config: ValidationConfig = None, today: Optional[date] = None):
        super().__init__(config)
        self.today = today

    def _perform_validation(self, text: Optional[str]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        if verify_date(text, self.today) == 0:
            result.add_error(f"Invalid birth date '{text}': expected dd/mm/yyyy, "
                             f"year {MIN_YEAR}-{MAX_YEAR}, at least {MIN_AGE_YEARS} years old")
        return result
