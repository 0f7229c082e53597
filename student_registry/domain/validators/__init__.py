"""
Validators package
Document and date validation
"""

from .base_validator import BaseValidator, ValidationConfig
from .cpf_validator import CpfValidator, verify_cpf
from .date_validator import BirthDateValidator, verify_date

__all__ = [
    'BaseValidator',
    'ValidationConfig',
    'CpfValidator',
    'verify_cpf',
    'BirthDateValidator',
    'verify_date'
]
