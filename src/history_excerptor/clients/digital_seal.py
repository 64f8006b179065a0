from __future__ import annotations

from typing import Any

import httpx

from history_excerptor.clients.schemas import SignRequestDto

SIGN_PATH = "/api/eseal/sign"


class DigitalSealClient:
    """
    REST client for the digital seal (system signature) service.

    Pass `client` to inject an httpx.Client (tests use MockTransport).
    """

    def __init__(self, base_url: str, timeout_s: float = 20.0, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(timeout=timeout_s)
        self._base_url = base_url.rstrip("/")

    def sign(self, request: SignRequestDto) -> dict[str, Any]:
        """Sign serialized data; the response is returned as decoded JSON."""
        r = self._client.post(f"{self._base_url}{SIGN_PATH}", json=request.model_dump(by_alias=True))
        r.raise_for_status()
        return r.json()

    def close(self) -> None:
        self._client.close()
