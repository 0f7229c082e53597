# student_registry/infrastructure/queries/query_builder.py
"""
Dynamic parameterized query construction from optional filters.

Every emitted '?' placeholder has exactly one bound parameter, in emission order.
Filters whose value is absent (None, or a blank string) emit nothing.
"""

import re
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_WHERE_PATTERN = re.compile(r'\bwhere\b', re.IGNORECASE)

Transform = Callable[[Any], Any]


def is_present(value: Any) -> bool:
    """Present means not None and, for strings, not blank."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def parse_delimited(text: Union[str, Iterable[str], None], delimiters: str = "-,") -> List[str]:
    """Split a hyphen- or comma-joined identifier list into trimmed, non-empty values."""
    if text is None:
        return []
    if isinstance(text, str):
        pattern = "[" + re.escape(delimiters) + "]"
        parts = re.split(pattern, text)
    else:
        parts = list(text)
    return [str(part).strip() for part in parts if part is not None and str(part).strip()]


def contains_pattern(value: str) -> str:
    return f"%{value.strip().upper()}%"


def starts_with_pattern(value: str) -> str:
    return f"{value.strip().upper()}%"


@dataclass(frozen=True)
class QueryFilter:
    """A predicate template with one '?' and an optional value."""
    predicate: str
    value: Any = None
    transform: Optional[Transform] = None

    def bound_value(self) -> Any:
        value = self.value.strip() if isinstance(self.value, str) else self.value
        return self.transform(value) if self.transform else value


@dataclass(frozen=True)
class BuiltQuery:
    """SQL text and its ordered parameters."""
    sql: str
    params: List[Any] = field(default_factory=list)

    @property
    def placeholder_count(self) -> int:
        return count_placeholders(self.sql)


def count_placeholders(sql: str) -> int:
    """Count '?' placeholders outside single-quoted literals."""
    count = 0
    in_literal = False
    for char in sql:
        if char == "'":
            in_literal = not in_literal
        elif char == '?' and not in_literal:
            count += 1
    return count


class DynamicQueryBuilder:
    """Builds a WHERE clause from optional filters on top of a fixed base clause."""

    def __init__(self, base_clause: str, joiner: str = "AND"):
        self.base_clause = base_clause.strip()
        self.joiner = joiner.strip().upper()
        # (predicate, params, is_literal); literal clauses are always ANDed.
        self._predicates: List[Tuple[str, List[Any], bool]] = []
        self._order_by: Optional[str] = None
        self._fetch_first: Optional[int] = None

    def _append(self, predicate: str, params: Sequence[Any], literal: bool = False) -> 'DynamicQueryBuilder':
        self._predicates.append((predicate.strip(), list(params), literal))
        return self

    def add(self, predicate: str, value: Any, transform: Optional[Transform] = None) -> 'DynamicQueryBuilder':
        """Add predicate and value when the value is present."""
        return self.add_filter(QueryFilter(predicate, value, transform))

    def add_filter(self, query_filter: QueryFilter) -> 'DynamicQueryBuilder':
        if not is_present(query_filter.value):
            return self
        if count_placeholders(query_filter.predicate) != 1:
            raise ValueError(f"Filter predicate must contain exactly one placeholder: {query_filter.predicate}")
        return self._append(query_filter.predicate, [query_filter.bound_value()])

    def add_group(self, filters: Iterable[QueryFilter], joiner: str = "OR") -> 'DynamicQueryBuilder':
        """Parenthesized group of the present filters, joined by joiner."""
        present = [f for f in filters if is_present(f.value)]
        if not present:
            return self
        separator = f" {joiner.strip().lower()} "
        predicate = "(" + separator.join(f.predicate.strip() for f in present) + ")"
        return self._append(predicate, [f.bound_value() for f in present])

    def equals(self, column: str, value: Any) -> 'DynamicQueryBuilder':
        return self.add(f"{column} = ?", value)

    def contains(self, column: str, value: Optional[str]) -> 'DynamicQueryBuilder':
        """Case-insensitive substring match."""
        return self.add(f"upper({column}) like ?", value, contains_pattern)

    def date_equals(self, column: str, value: Optional[str]) -> 'DynamicQueryBuilder':
        """Compare the dd/mm/yyyy rendering of a date column with a formatted string."""
        return self.add(f"TO_CHAR({column},'dd/mm/yyyy') = ?", value)

    def any_starts_with(self, column: str, prefixes: Union[str, Iterable[str], None]) -> 'DynamicQueryBuilder':
        """OR group of prefix matches, one parameter per prefix."""
        values = parse_delimited(prefixes, ",") if isinstance(prefixes, str) else list(prefixes or [])
        return self.add_group(
            [QueryFilter(f"upper({column}) like ?", value, starts_with_pattern) for value in values],
            joiner="OR"
        )

    def in_list(self, column: str, values: Union[str, Iterable[Any], None]) -> 'DynamicQueryBuilder':
        """Membership test with one bound placeholder per value."""
        items = parse_delimited(values) if isinstance(values, str) else [v for v in (values or []) if is_present(v)]
        if not items:
            return self
        items = [item.strip() if isinstance(item, str) else item for item in items]
        placeholders = ", ".join("?" for _ in items)
        return self._append(f"{column} in ({placeholders})", items)

    def raw(self, clause: str, *params: Any) -> 'DynamicQueryBuilder':
        """Inject a literal clause; its placeholders must match params."""
        if not clause or not clause.strip():
            return self
        expected = count_placeholders(clause)
        if expected != len(params):
            raise ValueError(f"Clause has {expected} placeholder(s) but {len(params)} parameter(s) were given")
        return self._append(clause, params, literal=True)

    def order_by(self, expression: str) -> 'DynamicQueryBuilder':
        self._order_by = expression
        return self

    def fetch_first(self, rows: int) -> 'DynamicQueryBuilder':
        if rows < 1:
            raise ValueError("fetch_first requires at least one row")
        self._fetch_first = rows
        return self

    def build(self) -> BuiltQuery:
        parts = [self.base_clause]
        params: List[Any] = []

        if self.joiner == "AND":
            ordered = self._predicates
            conditions = [predicate for predicate, _, _ in ordered]
        else:
            filters = [entry for entry in self._predicates if not entry[2]]
            literals = [entry for entry in self._predicates if entry[2]]
            ordered = filters + literals
            conditions = [predicate for predicate, _, _ in literals]
            if filters:
                group = f" {self.joiner.lower()} ".join(predicate for predicate, _, _ in filters)
                # OR-joined filters must not widen the base predicates or the literal clauses.
                if len(filters) > 1 and (literals or _WHERE_PATTERN.search(self.base_clause)):
                    group = f"({group})"
                conditions.insert(0, group)

        if conditions:
            keyword = "and" if _WHERE_PATTERN.search(self.base_clause) else "where"
            parts.append(f"{keyword} {' and '.join(conditions)}")
            for _, predicate_params, _ in ordered:
                params.extend(predicate_params)

        if self._order_by:
            parts.append(f"order by {self._order_by}")
        if self._fetch_first:
            parts.append(f"fetch first {self._fetch_first} rows only")

        sql = " ".join(parts)
        logger.debug(f"Built query with {len(params)} parameter(s)")
        return BuiltQuery(sql, params)


def build(base_clause: str, filters: Iterable[Union[QueryFilter, Tuple[str, Any]]], joiner: str = "AND") -> BuiltQuery:
    """Functional form: (predicate_template, value) pairs joined by joiner."""
    builder = DynamicQueryBuilder(base_clause, joiner)
    for item in filters:
        query_filter = item if isinstance(item, QueryFilter) else QueryFilter(*item)
        builder.add_filter(query_filter)
    return builder.build()
