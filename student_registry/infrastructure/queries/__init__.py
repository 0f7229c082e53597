"""
Parameterized query construction.
"""

from .query_builder import (
    BuiltQuery, DynamicQueryBuilder, QueryFilter, build, count_placeholders, is_present, parse_delimited
)

__all__ = [
    'BuiltQuery',
    'DynamicQueryBuilder',
    'QueryFilter',
    'build',
    'count_placeholders',
    'is_present',
    'parse_delimited'
]
