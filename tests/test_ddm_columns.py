from __future__ import annotations

from history_excerptor.models.ddm_columns import DDM_COLUMNS, DdmColumn, is_ddm_column
from history_excerptor.models.domain import DdmInfo


def test_every_ddm_column_has_a_ddm_info_field() -> None:
    assert len(DDM_COLUMNS) == 14
    fields = set(DdmInfo.__dataclass_fields__)
    assert {c.value.removeprefix("ddm_") for c in DdmColumn} == fields


def test_is_ddm_column() -> None:
    assert is_ddm_column("ddm_created_at")
    assert not is_ddm_column("name")
    assert not is_ddm_column("DDM_CREATED_AT")
