"""
Store adapter.

Executes parameterized statements of the shape ``text, [params...]`` and
returns rows as dictionaries. Positional parameters are bound to the named
placeholders ``:p1, :p2, ...`` produced by ``jobly.sql``.
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import StoreFailure
from .logger import StructuredLogger, get_logger


def bind_params(params: Sequence[Any]) -> Dict[str, Any]:
    """Map an ordered parameter list to ``{"p1": v1, "p2": v2, ...}``."""
    return {f"p{idx}": value for idx, value in enumerate(params, start=1)}


class Store:
    """
    Thin wrapper around a pooled SQLAlchemy engine.

    Each call runs in its own transaction, so a single statement is the unit
    of atomicity. The engine's pool is safe to share between threads.
    """

    def __init__(self, engine: Engine, logger: Optional[StructuredLogger] = None):
        self.engine = engine
        self.logger = logger or get_logger()

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute one statement and return its rows.

        Args:
            sql: Statement text with ``:pN`` placeholders
            params: Values aligned with the placeholders (``params[0]`` is ``:p1``)

        Returns:
            Rows as dicts; empty list for statements that return nothing

        Raises:
            StoreFailure: on any SQLAlchemy error
        """
        statement = " ".join(sql.split())
        self.logger.debug("Executing statement", sql=statement, param_count=len(params))
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(sql), bind_params(params))
                rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        except IntegrityError as e:
            self.logger.record_statement_failure()
            self.logger.warning("Constraint violation", sql=statement, error=str(e.orig))
            raise StoreFailure(str(e.orig), constraint_violation=True, original=e) from e
        except SQLAlchemyError as e:
            self.logger.record_statement_failure()
            self.logger.error("Statement failed", sql=statement, error=str(e))
            raise StoreFailure(str(e), original=e) from e

        self.logger.record_statement()
        return rows
