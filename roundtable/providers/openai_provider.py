"""OpenAI provider using openai SDK with native async."""

import logging
import time
from collections.abc import Sequence

from openai import AsyncOpenAI

from roundtable.models import HistoryEntry
from roundtable.providers.base import AIProvider, UpstreamError, chat_messages

logger = logging.getLogger(__name__)


class OpenAIProvider(AIProvider):
    """OpenAI provider via openai SDK."""

    _client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key(),
                timeout=float(self._config.timeout_sec),
                max_retries=0,
            )
        return self._client

    async def invoke(self, persona: str, message: str, history: Sequence[HistoryEntry]) -> str:
        client = self._get_client()
        start = time.monotonic()
        try:
            response = await client.chat.completions.create(
                model=self._config.model,
                messages=chat_messages(persona, message, history),
                max_tokens=self._config.max_tokens,
            )
        except Exception as exc:
            raise UpstreamError(self._advisor_id, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise UpstreamError(self._advisor_id, "Empty response content")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.total_tokens

        logger.info("OpenAI %s: %.2fs, %s tokens", self._advisor_id, latency, token_count)
        return choice.message.content
