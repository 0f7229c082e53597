# student_registry/domain/normalization.py
"""
String normalization rules inherited from the legacy student database.
"""

from typing import Optional

# Accented uppercase letters accepted by the legacy document columns.
_ACCENT_TABLE = str.maketrans({
    'Ç': 'C',
    'Á': 'A', 'À': 'A', 'Ã': 'A', 'Â': 'A', 'Ä': 'A',
    'É': 'E', 'È': 'E', 'Ê': 'E', 'Ë': 'E',
    'Í': 'I', 'Ì': 'I', 'Î': 'I', 'Ï': 'I',
    'Ó': 'O', 'Ò': 'O', 'Õ': 'O', 'Ö': 'O', 'Ô': 'O',
    'Ú': 'U', 'Ù': 'U', 'Û': 'U', 'Ü': 'U',
    "'": None,
})


def normalize(value: Optional[str]) -> Optional[str]:
    """Replace accented uppercase letters and strip apostrophes; other characters are kept."""
    if value is None:
        return None
    return value.translate(_ACCENT_TABLE)


def normalize_upper(value: Optional[str]) -> Optional[str]:
    """Normalize, then upper-case."""
    cleaned = normalize(value)
    return cleaned.upper() if cleaned is not None else None


def upper_or_none(value: Optional[str]) -> Optional[str]:
    return value.upper() if value is not None else None


def trim_or_none(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None
