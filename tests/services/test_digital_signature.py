from __future__ import annotations

import json

import httpx
import pytest

from history_excerptor.clients.digital_seal import DigitalSealClient
from history_excerptor.clients.schemas import ExcerptEventDto, to_canonical_json
from history_excerptor.errors import SignatureSerializationError
from history_excerptor.services.digital_signature import DigitalSignatureService


class InMemoryStorage:
    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], str] = {}

    def put_content(self, bucket: str, key: str, content: str) -> None:
        self.objects[(bucket, key)] = content


def _seal_client(captured: list) -> DigitalSealClient:
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"signature": "c2lnbmVk"})

    return DigitalSealClient("http://dso", client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_sign_sends_canonical_json_and_returns_response_text() -> None:
    captured: list[httpx.Request] = []
    service = DigitalSignatureService("request-signature", _seal_client(captured), InMemoryStorage())
    event = ExcerptEventDto(excerpt_type="history-excerpt", excerpt_input_data={"rows": []})

    signed = service.sign(event)

    assert signed == '{"signature":"c2lnbmVk"}'
    assert captured[0].url.path == "/api/eseal/sign"
    body = json.loads(captured[0].content)
    assert json.loads(body["data"]) == {
        "recordId": None,
        "excerptType": "history-excerpt",
        "excerptInputData": {"rows": []},
        "requiresSystemSignature": False,
    }


def test_sign_rejects_unserializable_payload_before_calling_seal() -> None:
    captured: list[httpx.Request] = []
    service = DigitalSignatureService("request-signature", _seal_client(captured), InMemoryStorage())

    with pytest.raises(SignatureSerializationError):
        service.sign({"value": object()})

    assert captured == []


def test_sign_rejects_unserializable_event_payload() -> None:
    captured: list[httpx.Request] = []
    service = DigitalSignatureService("request-signature", _seal_client(captured), InMemoryStorage())
    event = ExcerptEventDto(excerpt_type="history-excerpt", excerpt_input_data={"value": object()})

    with pytest.raises(SignatureSerializationError):
        service.sign(event)

    assert captured == []


def test_sign_propagates_seal_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    client = DigitalSealClient("http://dso", client=httpx.Client(transport=httpx.MockTransport(handler)))
    service = DigitalSignatureService("request-signature", client, InMemoryStorage())

    with pytest.raises(httpx.HTTPStatusError):
        service.sign({"a": 1})


def test_save_signature_generates_fresh_keys_for_same_content() -> None:
    storage = InMemoryStorage()
    service = DigitalSignatureService("request-signature", _seal_client([]), storage)

    first = service.save_signature('{"signature":"x"}')
    second = service.save_signature('{"signature":"x"}')

    assert first != second
    assert storage.objects[("request-signature", first)] == '{"signature":"x"}'
    assert storage.objects[("request-signature", second)] == '{"signature":"x"}'


def test_save_signature_propagates_storage_failure() -> None:
    class BrokenStorage:
        def put_content(self, bucket: str, key: str, content: str) -> None:
            raise ConnectionError("ceph unavailable")

    service = DigitalSignatureService("request-signature", _seal_client([]), BrokenStorage())

    with pytest.raises(ConnectionError):
        service.save_signature("x")


def test_to_canonical_json_rejects_nan() -> None:
    with pytest.raises(SignatureSerializationError):
        to_canonical_json({"x": float("nan")})
