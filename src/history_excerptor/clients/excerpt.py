from __future__ import annotations

from enum import Enum
from typing import Mapping
from uuid import UUID

import httpx

from history_excerptor.clients.schemas import (
    ExcerptEventDto,
    ExcerptResponse,
    StatusDto,
    to_canonical_json,
)


class ThirdPartyHeader(str, Enum):
    X_DIGITAL_SIGNATURE = "X-Digital-Signature"
    X_DIGITAL_SIGNATURE_DERIVED = "X-Digital-Signature-Derived"


class ExcerptClient:
    """
    REST client for the remote excerpt generator.

    Errors (non-2xx) surface as httpx.HTTPStatusError; nothing is retried here.
    """

    def __init__(self, base_url: str, timeout_s: float = 20.0, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(timeout=timeout_s)
        self._base_url = base_url.rstrip("/")

    def generate(self, event: ExcerptEventDto, headers: Mapping[str, str]) -> ExcerptResponse:
        r = self._client.post(
            f"{self._base_url}/excerpts",
            content=to_canonical_json(event).encode("utf-8"),
            headers={**headers, "Content-Type": "application/json"},
        )
        r.raise_for_status()
        return ExcerptResponse.model_validate(r.json())

    def status(self, excerpt_id: UUID) -> StatusDto:
        r = self._client.get(f"{self._base_url}/excerpts/{excerpt_id}/status")
        r.raise_for_status()
        return StatusDto.model_validate(r.json())

    def download(self, excerpt_id: UUID) -> bytes:
        """Generated document content."""
        r = self._client.get(f"{self._base_url}/excerpts/{excerpt_id}")
        r.raise_for_status()
        return r.content

    def close(self) -> None:
        self._client.close()
