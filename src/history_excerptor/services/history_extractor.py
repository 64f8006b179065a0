"""Result set -> HistoryExcerptData mapping."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

from sqlalchemy.engine import Result

from history_excerptor.models.ddm_columns import DdmColumn, is_ddm_column
from history_excerptor.models.domain import (
    DdmInfo,
    HistoryExcerptData,
    HistoryExcerptRow,
    OperationalTableField,
)
from history_excerptor.services.field_resolver import resolve_operational_field

FieldResolver = Callable[[Any], OperationalTableField]


def get_operational_table_columns(column_names: Sequence[str]) -> tuple[str, ...]:
    """Everything outside the DDM set, in declaration order."""
    return tuple(name for name in column_names if not is_ddm_column(name))


def format_created_at(value: Any) -> str | None:
    """
    Canonical ISO-8601 local date-time text.
    Aware timestamps are normalized to UTC; text is passed through as-is.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat()
    return str(value)


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


def get_ddm_info(row: Mapping[str, Any]) -> DdmInfo:
    def col(column: DdmColumn) -> str | None:
        return _as_text(row.get(column.value))

    return DdmInfo(
        created_at=format_created_at(row.get(DdmColumn.CREATED_AT.value)),
        created_by=col(DdmColumn.CREATED_BY),
        dml_op=col(DdmColumn.DML_OP),
        system_id=col(DdmColumn.SYSTEM_ID),
        application_id=col(DdmColumn.APPLICATION_ID),
        business_process_id=col(DdmColumn.BUSINESS_PROCESS_ID),
        business_process_definition_id=col(DdmColumn.BUSINESS_PROCESS_DEFINITION_ID),
        business_process_instance_id=col(DdmColumn.BUSINESS_PROCESS_INSTANCE_ID),
        business_activity=col(DdmColumn.BUSINESS_ACTIVITY),
        business_activity_instance_id=col(DdmColumn.BUSINESS_ACTIVITY_INSTANCE_ID),
        digital_sign=col(DdmColumn.DIGITAL_SIGN),
        digital_sign_derived=col(DdmColumn.DIGITAL_SIGN_DERIVED),
        digital_sign_checksum=col(DdmColumn.DIGITAL_SIGN_CHECKSUM),
        digital_sign_derived_checksum=col(DdmColumn.DIGITAL_SIGN_DERIVED_CHECKSUM),
    )


def get_operational_table_data(
    row: Mapping[str, Any],
    operational_table_columns: Sequence[str],
    resolver: FieldResolver = resolve_operational_field,
) -> dict[str, OperationalTableField]:
    return {name: resolver(row.get(name)) for name in operational_table_columns}


def extract_history(
    result: Result,
    resolver: FieldResolver = resolve_operational_field,
) -> HistoryExcerptData:
    """
    Materialize a history result set.

    Columns are classified once from the result metadata; rows keep the
    order the query produced. Driver errors raised while iterating are
    not caught here.
    """
    operational_table_columns = get_operational_table_columns(list(result.keys()))

    rows: list[HistoryExcerptRow] = []
    for row in result:
        mapping = row._mapping
        rows.append(
            HistoryExcerptRow(
                ddm_info=get_ddm_info(mapping),
                operational_table_data=get_operational_table_data(
                    mapping, operational_table_columns, resolver
                ),
            )
        )

    return HistoryExcerptData(
        operational_table_columns=operational_table_columns,
        rows=tuple(rows),
    )
