import json

import pytest

from app.ai.gemini import GeminiClient
from app.shared.config import settings
from app.shared.errors import ConfigurationError, GenerationError


def _envelope(text):
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}]}}]})


class RecordingTransport:
    def __init__(self, reply=None, exc=None):
        self.reply, self.exc = reply, exc
        self.requests = []

    def __call__(self, url, payload):
        self.requests.append((url, payload))
        if self.exc:
            raise self.exc
        return self.reply


@pytest.fixture
def gemini(monkeypatch):
    def _make(reply=None, exc=None):
        transport = RecordingTransport(reply, exc)
        c = GeminiClient(api_key="test-key", model="gemini-test")
        monkeypatch.setattr(c, "_post", transport)
        return c, transport
    return _make


def test_missing_key_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    with pytest.raises(ConfigurationError):
        GeminiClient()


def test_summary_request_shape(gemini):
    c, transport = gemini(_envelope("요약입니다."))
    assert c.generate_summary("메모 본문") == "요약입니다."

    url, payload = transport.requests[0]
    assert url.endswith("/models/gemini-test:generateContent")
    assert "메모 본문" in payload["contents"][0]["parts"][0]["text"]
    config = payload["generationConfig"]
    assert config["maxOutputTokens"] == settings.SUMMARY_MAX_TOKENS
    assert config["temperature"] == settings.GENERATION_TEMPERATURE
    assert "responseMimeType" not in config


def test_empty_summary_gets_fallback(gemini):
    c, _ = gemini(json.dumps({"candidates": []}))
    assert c.generate_summary("본문") == settings.FALLBACK_SUMMARY


def test_summary_transport_failure_becomes_generation_error(gemini):
    boom = RuntimeError("Gemini request failed with status 503.")
    c, _ = gemini(exc=boom)
    with pytest.raises(GenerationError) as info:
        c.generate_summary("본문")
    assert info.value.message == "메모 요약 생성 중 오류가 발생했습니다."
    assert "503" not in info.value.message
    assert info.value.__cause__ is boom


def test_summary_and_tags_asks_for_json(gemini):
    c, transport = gemini(_envelope(json.dumps({"summary": "S", "tags": ["x", "y"]})))
    out = c.generate_summary_and_tags("본문")
    assert out.as_dict() == {"summary": "S", "tags": ["x", "y"]}

    config = transport.requests[0][1]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["maxOutputTokens"] == settings.SUMMARY_TAGS_MAX_TOKENS


def test_summary_and_tags_joins_parts(gemini):
    body = json.dumps({"candidates": [{"content": {"parts": [
        {"text": '{"summary": "S", '}, {"text": '"tags": ["a"]}'},
    ]}}]})
    c, _ = gemini(body)
    assert c.generate_summary_and_tags("본문").tags == ["a"]


def test_summary_and_tags_empty_response_degrades(gemini):
    c, _ = gemini(json.dumps({"promptFeedback": {"blockReason": "SAFETY"}}))
    out = c.generate_summary_and_tags("본문")
    assert out.summary == settings.FALLBACK_SUMMARY
    assert out.tags == [settings.DEFAULT_TAG]


def test_garbage_envelope_is_a_generation_error(gemini):
    c, _ = gemini("<html>bad gateway</html>")
    with pytest.raises(GenerationError) as info:
        c.generate_summary_and_tags("본문")
    assert info.value.message == "메모 요약 및 태그 생성 중 오류가 발생했습니다."
