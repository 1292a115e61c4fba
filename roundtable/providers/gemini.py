"""Gemini provider using google-genai SDK with native async."""

import logging
import time
from collections.abc import Sequence

from google import genai
from google.genai import types as genai_types

from roundtable.models import HistoryEntry, Role
from roundtable.providers.base import AIProvider, UpstreamError

logger = logging.getLogger(__name__)


def _contents(message: str, history: Sequence[HistoryEntry]) -> list[genai_types.Content]:
    """Gemini names the assistant role "model"."""
    contents = [
        genai_types.Content(
            role="model" if entry.role is Role.ASSISTANT else "user",
            parts=[genai_types.Part(text=entry.text)],
        )
        for entry in history
    ]
    contents.append(genai_types.Content(role="user", parts=[genai_types.Part(text=message)]))
    return contents


class GeminiProvider(AIProvider):
    """Google Gemini provider via google-genai SDK."""

    _client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=self._api_key(),
                http_options=genai_types.HttpOptions(timeout=self._config.timeout_sec * 1000),
            )
        return self._client

    async def invoke(self, persona: str, message: str, history: Sequence[HistoryEntry]) -> str:
        client = self._get_client()
        start = time.monotonic()
        try:
            response = await client.aio.models.generate_content(
                model=self._config.model,
                contents=_contents(message, history),
                config=genai_types.GenerateContentConfig(
                    system_instruction=persona,
                    max_output_tokens=self._config.max_tokens,
                ),
            )
        except Exception as exc:
            raise UpstreamError(self._advisor_id, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        if not response.text:
            raise UpstreamError(self._advisor_id, "Empty response text")

        token_count: int | None = None
        if response.usage_metadata:
            token_count = response.usage_metadata.total_token_count

        logger.info("Gemini %s: %.2fs, %s tokens", self._advisor_id, latency, token_count)
        return response.text
