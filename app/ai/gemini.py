"""Google Gemini client (REST generateContent) for memo summaries and tags."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Optional, Protocol

from app.ai.parser import SummaryAndTags, parse_summary_and_tags
from app.ai.prompts import summary_prompt, summary_and_tags_prompt
from app.shared.config import settings
from app.shared.errors import ConfigurationError, GenerationError

logger = logging.getLogger("GeminiClient")

SUMMARY_ERROR = "메모 요약 생성 중 오류가 발생했습니다."
SUMMARY_AND_TAGS_ERROR = "메모 요약 및 태그 생성 중 오류가 발생했습니다."


class GenerationClient(Protocol):
    """What the rest of the app needs from a text-generation backend."""

    def generate_summary(self, content: str) -> str: ...

    def generate_summary_and_tags(self, content: str) -> SummaryAndTags: ...


class GeminiClient:
    """Gemini client using REST generateContent."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or settings.GEMINI_API_KEY
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set")
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.GEMINI_TIMEOUT_SECONDS

    def _post(self, url: str, payload: dict) -> str:
        request = urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "x-goog-api-key": self.api_key,
                "Content-Type": "application/json",
            },
            method="POST",
        )
        kwargs = {"timeout": self.timeout} if self.timeout else {}
        try:
            with urllib.request.urlopen(request, **kwargs) as response:
                return response.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            raise RuntimeError(f"Gemini request failed with status {exc.code}.") from exc
        except urllib.error.URLError as exc:
            raise RuntimeError("Gemini request failed to reach server.") from exc

    def generate_content(
        self,
        prompt: str,
        max_output_tokens: int,
        temperature: Optional[float] = None,
        json_mode: bool = False,
    ) -> str:
        """Send one prompt, return the concatenated text of the first candidate ("" if none)."""
        config = {
            "maxOutputTokens": max_output_tokens,
            "temperature": settings.GENERATION_TEMPERATURE if temperature is None else temperature,
        }
        if json_mode:
            config["responseMimeType"] = "application/json"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": config,
        }
        url = f"{self.base_url}/models/{self.model}:generateContent"

        response_text = self._post(url, payload)
        try:
            response_json = json.loads(response_text)
        except json.JSONDecodeError as exc:
            raise ValueError("Gemini response is not valid JSON.") from exc

        # blocked / empty candidates come back without parts
        try:
            parts = response_json["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return ""
        if not isinstance(parts, list):
            return ""
        return "".join(
            part["text"] for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

    def generate_summary(self, content: str) -> str:
        try:
            text = self.generate_content(summary_prompt(content), settings.SUMMARY_MAX_TOKENS)
        except Exception as exc:
            logger.error(f"Error generating summary: {exc}")
            raise GenerationError(SUMMARY_ERROR) from exc
        return text.strip() or settings.FALLBACK_SUMMARY

    def generate_summary_and_tags(self, content: str) -> SummaryAndTags:
        try:
            text = self.generate_content(
                summary_and_tags_prompt(content, settings.MAX_TAGS),
                settings.SUMMARY_TAGS_MAX_TOKENS,
                json_mode=True,
            )
        except Exception as exc:
            logger.error(f"Error generating summary and tags: {exc}")
            raise GenerationError(SUMMARY_AND_TAGS_ERROR) from exc
        return parse_summary_and_tags(text or "{}")


_client: Optional[GeminiClient] = None


def build_generation_client() -> GeminiClient:
    """Process-wide client; raises ConfigurationError when the key is missing."""
    global _client
    if _client is None:
        _client = GeminiClient()
    return _client


# FastAPI dep
def get_generation_client() -> GenerationClient:
    return build_generation_client()
