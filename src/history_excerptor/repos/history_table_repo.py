from __future__ import annotations

import re
from uuid import UUID

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from history_excerptor.errors import HistoryReadError, UnknownHistoryTableError
from history_excerptor.models.ddm_columns import DdmColumn
from history_excerptor.models.domain import HistoryExcerptData
from history_excerptor.services.history_extractor import extract_history

logger = structlog.get_logger(__name__)

# Identifiers are interpolated into the query text (no quoting), so they
# must look like plain SQL identifiers AND exist in the registry schema.
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SQL_HISTORY_REQUEST_PATTERN = (
    "select * from {table_name} where {search_column} = :record_id "
    f"order by {DdmColumn.CREATED_AT.value} desc"
)


class HistoryTableSelectRepo:
    """
    Read access to operational history (*_hst) tables.

    Responsibility:
    - validate table/column names against the live schema
    - run the audit-trail query (newest entry first)
    - hand the result set to the row mapper
    """

    def __init__(self, engine: Engine, history_table_suffix: str = "_hst") -> None:
        self._engine = engine
        self._history_table_suffix = history_table_suffix

    def get_table_columns(self, table_name: str) -> list[str]:
        """Column names of a table as declared in information_schema (empty if unknown)."""
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(
                        """
                        SELECT column_name
                        FROM information_schema.columns
                        WHERE table_name = :table_name
                        ORDER BY ordinal_position
                        """
                    ),
                    {"table_name": table_name},
                ).fetchall()
        except SQLAlchemyError as e:
            raise HistoryReadError(f"Failed to read columns of {table_name}: {e}") from e
        return [r[0] for r in rows]

    def _check_identifiers(self, table_name: str, search_column: str) -> None:
        for name in (table_name, search_column):
            if not _IDENTIFIER_RE.match(name):
                raise UnknownHistoryTableError(f"Not a valid SQL identifier: {name!r}")

        columns = self.get_table_columns(table_name)
        if not columns:
            raise UnknownHistoryTableError(f"Unknown history table: {table_name}")
        if search_column not in columns:
            raise UnknownHistoryTableError(
                f"Column {search_column} does not exist in table {table_name}"
            )

    def get_history_data(self, table_name: str, search_column: str, record_id: UUID) -> HistoryExcerptData:
        """
        All history entries of one record, most recent first.

        Raises UnknownHistoryTableError before touching the data when the
        names are not part of the schema; HistoryReadError on any data-access
        failure (never returns partial data).
        """
        self._check_identifiers(table_name, search_column)
        sql = SQL_HISTORY_REQUEST_PATTERN.format(table_name=table_name, search_column=search_column)

        try:
            with self._engine.connect() as conn:
                result = conn.execute(text(sql), {"record_id": str(record_id)})
                data = extract_history(result)
        except SQLAlchemyError as e:
            raise HistoryReadError(f"Failed to read history from {table_name}: {e}") from e

        logger.info(
            "history_query_executed",
            table_name=table_name,
            search_column=search_column,
            rows=len(data.rows),
        )
        return data

    def get_record_history(self, table_name: str, record_id: UUID) -> HistoryExcerptData:
        """
        History of a record of a registry table by naming convention:
        entries live in <table><suffix>, keyed by <table>_id.
        """
        return self.get_history_data(
            table_name=f"{table_name}{self._history_table_suffix}",
            search_column=f"{table_name}_id",
            record_id=record_id,
        )
