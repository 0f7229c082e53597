# student_registry/infrastructure/repositories/base_repository.py
"""
Base repository for the legacy databases: one LegacyDao session per operation.
"""

import logging
from abc import ABC
from typing import Any, Callable, Dict, List, Optional, Union

from ...domain.models import DatabaseKind
from ..database.legacy_dao import LegacyDao
from ..queries.query_builder import BuiltQuery

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
DaoFactory = Callable[[], LegacyDao]


class BaseLegacyRepository(ABC):
    """Repository base; each operation opens its own session and always disconnects."""

    def __init__(self, dao_factory: DaoFactory, kind: Union[str, DatabaseKind] = DatabaseKind.ORACLE):
        self.dao_factory = dao_factory
        self.kind = DatabaseKind.from_selector(kind)

    def new_dao(self) -> LegacyDao:
        return self.dao_factory()

    @staticmethod
    def fetch_all(dao: LegacyDao, query: BuiltQuery) -> List[Row]:
        """Prepare, bind and execute on an open session; rows are materialized."""
        statement = dao.prepare_statement(query.sql)
        statement.set_parameters(query.params)
        return statement.execute_query().fetchall()

    @staticmethod
    def fetch_first(dao: LegacyDao, query: BuiltQuery) -> Optional[Row]:
        statement = dao.prepare_statement(query.sql)
        statement.set_parameters(query.params)
        return statement.execute_query().fetchone()

    def execute_query(self, query: BuiltQuery) -> List[Row]:
        """Run a single query in its own session."""
        with self.new_dao().session(self.kind) as dao:
            rows = self.fetch_all(dao, query)
        logger.debug(f"Query returned {len(rows)} records")
        return rows

    def execute_update(self, sql: str, params: List[Any]) -> int:
        """Run a single write in its own session and return the affected row count."""
        with self.new_dao().session(self.kind) as dao:
            statement = dao.prepare_update(sql)
            statement.set_parameters(params)
            return statement.execute_update()
