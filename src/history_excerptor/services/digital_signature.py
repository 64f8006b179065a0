from __future__ import annotations

from typing import Any
from uuid import uuid4

import structlog

from history_excerptor.clients.digital_seal import DigitalSealClient
from history_excerptor.clients.schemas import SignRequestDto, to_canonical_json
from history_excerptor.clients.storage import ObjectStorage

logger = structlog.get_logger(__name__)


class DigitalSignatureService:
    """Signs request payloads and keeps the signatures in the request-signature bucket."""

    def __init__(
        self,
        request_signature_bucket: str,
        digital_seal_client: DigitalSealClient,
        storage: ObjectStorage,
    ) -> None:
        self._bucket = request_signature_bucket
        self._seal_client = digital_seal_client
        self._storage = storage

    def sign(self, payload: Any) -> str:
        sign_request = SignRequestDto(data=to_canonical_json(payload))
        logger.info("signing_data")
        sign_response = self._seal_client.sign(sign_request)
        return to_canonical_json(sign_response)

    def save_signature(self, value: str) -> str:
        """Store under a fresh random key (never content-derived) and return the key."""
        key = str(uuid4())
        logger.info("storing_signature", bucket=self._bucket)
        logger.debug("signature_key_generated", key=key)
        self._storage.put_content(self._bucket, key, value)
        return key
