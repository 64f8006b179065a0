"""Global test fixtures."""

import sys
from pathlib import Path

import pytest
from sqlalchemy import text

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from history_excerptor.config.settings import get_settings  # noqa: E402
from history_excerptor.db.engine import build_engine  # noqa: E402

RECORD_ID = "3cb1f5c0-0f3e-4c1e-9b8a-1d2f3e4a5b6c"
OTHER_RECORD_ID = "9d7e0a11-2b3c-4d5e-8f90-a1b2c3d4e5f6"
NULL_TS_RECORD_ID = "5a5a5a5a-0000-4000-8000-000000000001"

# Business columns deliberately interleaved with DDM columns.
HISTORY_DDL = """
CREATE TABLE laboratory_hst (
    laboratory_id VARCHAR,
    ddm_created_at TIMESTAMP,
    name VARCHAR,
    ddm_created_by VARCHAR,
    ddm_dml_op VARCHAR,
    staff_count INTEGER,
    accredited BOOLEAN,
    ddm_system_id VARCHAR,
    ddm_application_id VARCHAR,
    ddm_business_process_id VARCHAR,
    ddm_business_process_definition_id VARCHAR,
    ddm_business_process_instance_id VARCHAR,
    ddm_business_activity VARCHAR,
    ddm_business_activity_instance_id VARCHAR,
    tags VARCHAR[],
    details VARCHAR,
    ddm_digital_sign VARCHAR,
    ddm_digital_sign_derived VARCHAR,
    ddm_digital_sign_checksum VARCHAR,
    ddm_digital_sign_derived_checksum VARCHAR
)
"""

INSERT_HISTORY = """
INSERT INTO laboratory_hst (
    laboratory_id, ddm_created_at, name, ddm_created_by, ddm_dml_op,
    staff_count, accredited, ddm_system_id, ddm_business_process_id,
    tags, details, ddm_digital_sign
) VALUES (
    :laboratory_id, :created_at, :name, :created_by, :dml_op,
    :staff_count, :accredited, 'system-1', 'bp-1',
    :tags, :details, 'sign-ref'
)
"""

HISTORY_ROWS = [
    # inserted out of chronological order on purpose
    {
        "laboratory_id": RECORD_ID,
        "created_at": "2024-03-02 09:00:00",
        "name": "Lab B",
        "created_by": "officer",
        "dml_op": "U",
        "staff_count": 12,
        "accredited": True,
        "tags": ["chemistry"],
        "details": '{"room": 4}',
    },
    {
        "laboratory_id": RECORD_ID,
        "created_at": "2024-03-01 10:15:30",
        "name": "Lab A",
        "created_by": "officer",
        "dml_op": "I",
        "staff_count": 10,
        "accredited": False,
        "tags": [],
        "details": None,
    },
    {
        "laboratory_id": RECORD_ID,
        "created_at": "2024-03-05 18:30:00",
        "name": None,
        "created_by": "admin",
        "dml_op": "D",
        "staff_count": None,
        "accredited": None,
        "tags": None,
        "details": "closed",
    },
    {
        "laboratory_id": OTHER_RECORD_ID,
        "created_at": "2024-01-01 00:00:00",
        "name": "Other lab",
        "created_by": "officer",
        "dml_op": "I",
        "staff_count": 3,
        "accredited": True,
        "tags": ["physics", "optics"],
        "details": None,
    },
    {
        "laboratory_id": NULL_TS_RECORD_ID,
        "created_at": None,
        "name": "Legacy lab",
        "created_by": None,
        "dml_op": "I",
        "staff_count": 1,
        "accredited": False,
        "tags": None,
        "details": None,
    },
]

EXPECTED_OPERATIONAL_COLUMNS = (
    "laboratory_id",
    "name",
    "staff_count",
    "accredited",
    "tags",
    "details",
)


def seed_history(engine) -> None:
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE laboratory (laboratory_id VARCHAR PRIMARY KEY, name VARCHAR)"))
        conn.execute(text(HISTORY_DDL))
        for row in HISTORY_ROWS:
            conn.execute(text(INSERT_HISTORY), row)


@pytest.fixture()
def history_db_url(tmp_path) -> str:
    db_url = f"duckdb:///{tmp_path / 'registry.duckdb'}"
    engine = build_engine(db_url)
    seed_history(engine)
    engine.dispose()
    return db_url


@pytest.fixture()
def history_engine(history_db_url):
    engine = build_engine(history_db_url)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def _required_settings(monkeypatch):
    # Required settings have no defaults; give every test a valid baseline.
    monkeypatch.setenv("HISTORY_EXCERPTOR_REQUEST_SIGNATURE_BUCKET", "request-signature")
    monkeypatch.setenv("HISTORY_EXCERPTOR_EXCERPT_STATUS_CHECK_MAX_ATTEMPTS", "3")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
