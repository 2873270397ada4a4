"""
Language-model access.

The services only know the ``TextGenerator`` protocol: one prompt in, one
string out. ``GeminiTextGenerator`` is the production implementation; tests
swap in a stub through ``app.dependency_overrides``.

Failure policy: a single call, no retry and no fallback model. Anything
that keeps us from getting non-empty text back raises
``ExternalServiceError``.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol

from google import genai
from google.genai import types

from errors import ExternalServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
MAX_OUTPUT_TOKENS = 1024


class TextGenerator(Protocol):
    def generate_text(self, prompt: str) -> str: ...


def _api_key() -> Optional[str]:
    return os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")


class GeminiTextGenerator:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.model = model or os.environ.get("GEMINI_MODEL", DEFAULT_MODEL)
        self._api_key = api_key
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            key = self._api_key or _api_key()
            if not key:
                raise ExternalServiceError("GEMINI_API_KEY is not set")
            self._client = genai.Client(api_key=key)
        return self._client

    def generate_text(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    max_output_tokens=MAX_OUTPUT_TOKENS,
                    temperature=0.7,
                ),
            )
        except Exception as exc:
            logger.exception("Gemini call failed (model=%s)", self.model)
            raise ExternalServiceError(f"{type(exc).__name__}: {exc}") from exc

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            # safety block or empty candidate list
            raise ExternalServiceError("empty response from language model")
        return text


_default: Optional[GeminiTextGenerator] = None


def get_default_generator() -> GeminiTextGenerator:
    global _default
    if _default is None:
        _default = GeminiTextGenerator()
    return _default
