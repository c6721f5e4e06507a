"""Unit tests for core.trans.engines.google_v2 module."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, ClassVar

import aiohttp
import pytest

from core.trans.engines import google_v2 as google_v2_module
from core.trans.interface import ErrorKind, TranslationServiceError
from models.translation_models import DetectionResult

API_URL: str = "https://translation.example.com/v2"


class DummyResponse:
    def __init__(self, status: int, body: str, reason: str | None = None) -> None:
        self.status: int = status
        self.reason: str | None = reason
        self._body: str = body

    async def text(self) -> str:
        return self._body


class DummyRequestContext:
    def __init__(self, outcome: DummyResponse | BaseException) -> None:
        self._outcome: DummyResponse | BaseException = outcome

    async def __aenter__(self) -> DummyResponse:
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        return self._outcome

    async def __aexit__(self, *args: object) -> None:
        _ = args


class DummySession:
    outcomes: ClassVar[list[DummyResponse | BaseException]] = []
    requests: ClassVar[list[dict[str, Any]]] = []
    instances: ClassVar[int] = 0

    def __init__(self, *args, **kwargs) -> None:
        _ = args, kwargs
        self.closed = False
        type(self).instances += 1

    def post(self, url: str, **kwargs: Any) -> DummyRequestContext:
        type(self).requests.append({"url": url, **kwargs})
        return DummyRequestContext(type(self).outcomes.pop(0))

    async def close(self) -> None:
        self.closed = True


def respond(status: int, payload: Any, reason: str | None = None) -> DummyResponse:
    body: str = payload if isinstance(payload, str) else json.dumps(payload)
    return DummyResponse(status, body, reason)


@pytest.fixture(autouse=True)
def patch_session(monkeypatch: pytest.MonkeyPatch) -> None:
    DummySession.outcomes = []
    DummySession.requests = []
    DummySession.instances = 0
    monkeypatch.setattr(google_v2_module.aiohttp, "ClientSession", DummySession)
    monkeypatch.setenv("GOOGLE_V2_API_OAUTH", "secret-key")


@pytest.fixture
def config() -> Any:
    return SimpleNamespace(TRANSLATION=SimpleNamespace(API_URL=API_URL + "/", REQUEST_TIMEOUT=3.0))


@pytest.fixture
def engine(config: Any) -> google_v2_module.GoogleV2Translation:
    instance = google_v2_module.GoogleV2Translation()
    instance.initialize(config)
    return instance


def test_engine_is_registered_under_its_name() -> None:
    registered = google_v2_module.TransInterface.registered

    assert registered["google_v2"] is google_v2_module.GoogleV2Translation


def test_initialize_reads_settings_and_key(engine: google_v2_module.GoogleV2Translation) -> None:
    assert engine.is_available is True
    assert engine.api_url == API_URL
    assert engine.timeout == 3.0
    assert engine.engine_name == "google_v2"


def test_initialize_without_key_leaves_engine_unavailable(monkeypatch: pytest.MonkeyPatch, config: Any) -> None:
    monkeypatch.delenv("GOOGLE_V2_API_OAUTH", raising=False)
    instance = google_v2_module.GoogleV2Translation()

    instance.initialize(config)

    assert instance.is_available is False


@pytest.mark.asyncio
async def test_detect_language_parses_first_detection(engine: google_v2_module.GoogleV2Translation) -> None:
    DummySession.outcomes.append(
        respond(200, {"data": {"detections": [[{"language": "ja", "confidence": 0.98, "isReliable": False}]]}})
    )

    result: DetectionResult = await engine.detect_language("こんにちは")

    assert result == DetectionResult(language="ja", confidence=0.98)
    request = DummySession.requests[0]
    assert request["url"] == f"{API_URL}/detect"
    assert request["params"] == {"key": "secret-key"}
    assert request["json"] == {"q": "こんにちは"}


@pytest.mark.asyncio
async def test_translation_posts_language_pair(engine: google_v2_module.GoogleV2Translation) -> None:
    DummySession.outcomes.append(respond(200, {"data": {"translations": [{"translatedText": "こんにちは"}]}}))

    translated: str = await engine.translation("Hello", tgt_lang="ja", src_lang="en")

    assert translated == "こんにちは"
    request = DummySession.requests[0]
    assert request["url"] == API_URL
    assert request["json"] == {"q": "Hello", "source": "en", "target": "ja", "format": "text"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (400, ErrorKind.FATAL),
        (403, ErrorKind.FATAL),
        (429, ErrorKind.RATE_LIMITED),
        (500, ErrorKind.TRANSIENT),
        (503, ErrorKind.TRANSIENT),
    ],
)
async def test_error_status_is_classified(
    engine: google_v2_module.GoogleV2Translation, status: int, kind: ErrorKind
) -> None:
    DummySession.outcomes.append(respond(status, {"error": {"message": "nope"}}, reason="Error"))

    with pytest.raises(TranslationServiceError) as exc_info:
        await engine.translation("Hello", tgt_lang="ja", src_lang="en")

    assert exc_info.value.kind is kind
    assert exc_info.value.status == status
    assert str(status) in str(exc_info.value)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [TimeoutError(), ConnectionResetError(), aiohttp.ServerDisconnectedError()],
)
async def test_network_failures_are_transient(
    engine: google_v2_module.GoogleV2Translation, error: BaseException
) -> None:
    DummySession.outcomes.append(error)

    with pytest.raises(TranslationServiceError) as exc_info:
        await engine.detect_language("Hello")

    assert exc_info.value.kind is ErrorKind.TRANSIENT
    assert exc_info.value.status is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        [1, 2, 3],
        {"data": {}},
        {"data": {"detections": []}},
        {"data": {"detections": [[{"confidence": 0.5}]]}},
    ],
)
async def test_malformed_detection_response_is_fatal(
    engine: google_v2_module.GoogleV2Translation, payload: Any
) -> None:
    DummySession.outcomes.append(respond(200, payload))

    with pytest.raises(TranslationServiceError) as exc_info:
        await engine.detect_language("Hello")

    assert exc_info.value.kind is ErrorKind.FATAL


@pytest.mark.asyncio
async def test_malformed_translation_response_is_fatal(engine: google_v2_module.GoogleV2Translation) -> None:
    DummySession.outcomes.append(respond(200, {"data": {"translations": [{"translatedText": None}]}}))

    with pytest.raises(TranslationServiceError) as exc_info:
        await engine.translation("Hello", tgt_lang="ja", src_lang="en")

    assert exc_info.value.kind is ErrorKind.FATAL


@pytest.mark.asyncio
async def test_session_is_reused_and_closed(engine: google_v2_module.GoogleV2Translation) -> None:
    DummySession.outcomes.extend(
        [
            respond(200, {"data": {"translations": [{"translatedText": "a"}]}}),
            respond(200, {"data": {"translations": [{"translatedText": "b"}]}}),
        ]
    )
    await engine.translation("x", tgt_lang="ja", src_lang="en")
    await engine.translation("y", tgt_lang="ja", src_lang="en")

    assert DummySession.instances == 1

    await engine.close()

    assert engine.is_available is False


class UndecodableResponse(DummyResponse):
    async def text(self) -> str:
        raise UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [200, 503])
async def test_undecodable_body_is_fatal(engine: google_v2_module.GoogleV2Translation, status: int) -> None:
    DummySession.outcomes.append(UndecodableResponse(status, ""))

    with pytest.raises(TranslationServiceError) as exc_info:
        await engine.detect_language("hello")

    assert exc_info.value.kind is ErrorKind.FATAL
    assert exc_info.value.status == status
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


@pytest.mark.asyncio
@pytest.mark.parametrize("confidence", ["NaN", "Infinity", "-0.1", "1.5"])
async def test_out_of_range_confidence_is_fatal(
    engine: google_v2_module.GoogleV2Translation, confidence: str
) -> None:
    body: str = f'{{"data": {{"detections": [[{{"language": "en", "confidence": {confidence}}}]]}}}}'
    DummySession.outcomes.append(respond(200, body))

    with pytest.raises(TranslationServiceError) as exc_info:
        await engine.detect_language("hello")

    assert exc_info.value.kind is ErrorKind.FATAL


@pytest.mark.asyncio
async def test_missing_confidence_defaults_to_zero(engine: google_v2_module.GoogleV2Translation) -> None:
    DummySession.outcomes.append(respond(200, {"data": {"detections": [[{"language": "en"}]]}}))

    result: DetectionResult = await engine.detect_language("hello")

    assert result == DetectionResult(language="en", confidence=0.0)
