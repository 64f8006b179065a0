"""Wire DTOs for the signing and excerpt services."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import PydanticSerializationError

from history_excerptor.errors import SignatureSerializationError


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ExcerptProcessingStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ExcerptEventDto(_CamelModel):
    record_id: Optional[UUID] = Field(None, alias="recordId")
    excerpt_type: str = Field(..., alias="excerptType")
    excerpt_input_data: dict[str, Any] = Field(default_factory=dict, alias="excerptInputData")
    requires_system_signature: bool = Field(False, alias="requiresSystemSignature")


class ExcerptResponse(_CamelModel):
    excerpt_identifier: UUID = Field(..., alias="excerptIdentifier")


class StatusDto(_CamelModel):
    # Kept as plain text: terminal values are the caller's business.
    status: str
    status_details: Optional[str] = Field(None, alias="statusDetails")

    @property
    def in_progress(self) -> bool:
        return self.status == ExcerptProcessingStatus.IN_PROGRESS.value


class SignRequestDto(_CamelModel):
    data: str


def to_canonical_json(value: Any) -> str:
    """
    Compact JSON text; pydantic models are dumped by alias.

    The same text is signed and submitted, so both sides must use this.
    """
    try:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", by_alias=True)
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SignatureSerializationError(f"Cannot serialize {type(value).__name__}: {e}") from e
