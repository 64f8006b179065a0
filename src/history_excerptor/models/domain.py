from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class OperationalTableFieldType(str, Enum):
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    DATE_TIME = "DATE_TIME"
    JSON = "JSON"
    ARRAY = "ARRAY"


@dataclass(frozen=True)
class OperationalTableField:
    """One business-column cell after type resolution."""

    value: str | None
    type: OperationalTableFieldType

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "type": self.type.value}


@dataclass(frozen=True)
class DdmInfo:
    """System metadata of one history entry."""

    created_at: str | None = None
    created_by: str | None = None
    dml_op: str | None = None
    system_id: str | None = None
    application_id: str | None = None
    business_process_id: str | None = None
    business_process_definition_id: str | None = None
    business_process_instance_id: str | None = None
    business_activity: str | None = None
    business_activity_instance_id: str | None = None
    digital_sign: str | None = None
    digital_sign_derived: str | None = None
    digital_sign_checksum: str | None = None
    digital_sign_derived_checksum: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {_camel(k): v for k, v in asdict(self).items()}


@dataclass(frozen=True)
class HistoryExcerptRow:
    ddm_info: DdmInfo
    operational_table_data: Mapping[str, OperationalTableField] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only view: keys must stay equal to the declared operational columns.
        if not isinstance(self.operational_table_data, MappingProxyType):
            object.__setattr__(
                self, "operational_table_data", MappingProxyType(dict(self.operational_table_data))
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ddmInfo": self.ddm_info.to_dict(),
            "operationalTableData": {
                name: value.to_dict() for name, value in self.operational_table_data.items()
            },
        }


@dataclass(frozen=True)
class HistoryExcerptData:
    """
    History trail of one record.

    operational_table_columns: business columns in result-set order (output layout)
    rows: audit entries in query order, newest first
    """

    operational_table_columns: tuple[str, ...]
    rows: tuple[HistoryExcerptRow, ...]

    def to_dict(self) -> dict[str, Any]:
        """JSON shape sent to the excerpt generator as excerptInputData."""
        return {
            "operationalTableColumns": list(self.operational_table_columns),
            "rows": [row.to_dict() for row in self.rows],
        }


def _camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)
