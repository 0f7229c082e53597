# student_registry/domain/validators/base_validator.py
"""
Base validator that the document validators inherit from.
"""

import logging
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Dict, Any
from dataclasses import dataclass

from ..models import ValidationResult

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class ValidationConfig:
    """Base configuration for validators."""
    strict_mode: bool = False
    collect_warnings: bool = True


class BaseValidator(Generic[T], ABC):
    """Base validator with error handling and statistics."""

    def __init__(self, config: ValidationConfig = None):
        self.config = config or ValidationConfig()
        self._validation_count = 0
        self._error_count = 0
        self._warning_count = 0

    def validate(self, entity: T) -> ValidationResult:
        """Validate entity; unexpected exceptions become an invalid result."""
        self._validation_count += 1

        try:
            result = self._perform_validation(entity)

            if result.errors:
                self._error_count += len(result.errors)
            if result.warnings:
                self._warning_count += len(result.warnings)
                if self.config.strict_mode:
                    result.is_valid = False
                if not self.config.collect_warnings:
                    result.warnings.clear()

            return result

        except Exception as e:
            logger.error(f"Validation error for {type(entity).__name__}: {e}")
            error_result = ValidationResult(is_valid=False)
            error_result.add_error(f"Validation exception: {e}")
            return error_result

    @abstractmethod
    def _perform_validation(self, entity: T) -> ValidationResult:
        """Perform the actual validation logic."""
        pass

    def get_validation_summary(self) -> Dict[str, Any]:
        """Get validation summary statistics."""
        return {
            'total_validations': self._validation_count,
            'total_errors': self._error_count,
            'total_warnings': self._warning_count,
            'error_rate': (self._error_count / self._validation_count * 100) if self._validation_count > 0 else 0
        }

    def reset_statistics(self) -> None:
        """Reset validation statistics."""
        self._validation_count = 0
        self._error_count = 0
        self._warning_count = 0
