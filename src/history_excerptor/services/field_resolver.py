"""Raw database value -> OperationalTableField resolution."""

from __future__ import annotations

import base64
import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from history_excerptor.models.domain import OperationalTableField, OperationalTableFieldType


def _to_json(value: Any) -> str:
    # default=str keeps nested UUIDs, Decimals, datetimes from raising
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def _resolve_text(value: str) -> OperationalTableField:
    """
    Some drivers hand JSON/JSONB back as text. Only text that actually
    parses as an object or array is promoted; everything else stays TEXT.
    """
    stripped = value.strip()
    if stripped[:1] in ("{", "["):
        try:
            parsed = json.loads(stripped)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            return OperationalTableField(value, OperationalTableFieldType.JSON)
        if isinstance(parsed, list):
            return OperationalTableField(value, OperationalTableFieldType.ARRAY)
    return OperationalTableField(value, OperationalTableFieldType.TEXT)


def resolve_operational_field(value: Any) -> OperationalTableField:
    """
    Resolve one raw cell into (stringified value, semantic type).

    Pure and total: every input maps to a field, nothing raises.
    """
    if value is None:
        return OperationalTableField(None, OperationalTableFieldType.TEXT)

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return OperationalTableField("true" if value else "false", OperationalTableFieldType.BOOLEAN)

    if isinstance(value, (int, float, Decimal)):
        return OperationalTableField(str(value), OperationalTableFieldType.NUMBER)

    if isinstance(value, (datetime, date, time)):
        return OperationalTableField(value.isoformat(), OperationalTableFieldType.DATE_TIME)

    if isinstance(value, dict):
        return OperationalTableField(_to_json(value), OperationalTableFieldType.JSON)

    if isinstance(value, (list, tuple)):
        return OperationalTableField(_to_json(list(value)), OperationalTableFieldType.ARRAY)

    if isinstance(value, str):
        return _resolve_text(value)

    if isinstance(value, (bytes, bytearray, memoryview)):
        encoded = base64.b64encode(bytes(value)).decode("ascii")
        return OperationalTableField(encoded, OperationalTableFieldType.TEXT)

    return OperationalTableField(str(value), OperationalTableFieldType.TEXT)
