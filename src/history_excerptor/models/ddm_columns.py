"""Fixed system/audit (DDM) columns present on every operational history table."""

from __future__ import annotations

from enum import Enum


class DdmColumn(str, Enum):
    CREATED_AT = "ddm_created_at"
    CREATED_BY = "ddm_created_by"
    DML_OP = "ddm_dml_op"
    SYSTEM_ID = "ddm_system_id"
    APPLICATION_ID = "ddm_application_id"
    BUSINESS_PROCESS_ID = "ddm_business_process_id"
    BUSINESS_PROCESS_DEFINITION_ID = "ddm_business_process_definition_id"
    BUSINESS_PROCESS_INSTANCE_ID = "ddm_business_process_instance_id"
    BUSINESS_ACTIVITY = "ddm_business_activity"
    BUSINESS_ACTIVITY_INSTANCE_ID = "ddm_business_activity_instance_id"
    DIGITAL_SIGN = "ddm_digital_sign"
    DIGITAL_SIGN_DERIVED = "ddm_digital_sign_derived"
    DIGITAL_SIGN_CHECKSUM = "ddm_digital_sign_checksum"
    DIGITAL_SIGN_DERIVED_CHECKSUM = "ddm_digital_sign_derived_checksum"


# Classification depends on this set being complete: anything else is operational.
DDM_COLUMNS: frozenset[str] = frozenset(c.value for c in DdmColumn)


def is_ddm_column(column_name: str) -> bool:
    return column_name in DDM_COLUMNS
