"""Anthropic Claude provider using anthropic SDK with native async."""

import logging
import time
from collections.abc import Sequence

import anthropic as anthropic_sdk

from roundtable.models import HistoryEntry
from roundtable.providers.base import AIProvider, UpstreamError, chat_messages

logger = logging.getLogger(__name__)


class AnthropicProvider(AIProvider):
    """Anthropic Claude provider via anthropic SDK."""

    _client: anthropic_sdk.AsyncAnthropic | None = None

    def _get_client(self) -> anthropic_sdk.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic_sdk.AsyncAnthropic(
                api_key=self._api_key(),
                timeout=float(self._config.timeout_sec),
                max_retries=0,
            )
        return self._client

    async def invoke(self, persona: str, message: str, history: Sequence[HistoryEntry]) -> str:
        client = self._get_client()
        start = time.monotonic()
        try:
            response = await client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                system=persona,
                messages=chat_messages(None, message, history),
            )
        except Exception as exc:
            raise UpstreamError(self._advisor_id, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        if not response.content:
            raise UpstreamError(self._advisor_id, "Empty response content")

        text_blocks = [b.text for b in response.content if b.type == "text"]
        if not text_blocks:
            raise UpstreamError(self._advisor_id, "No text blocks in response")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.input_tokens + response.usage.output_tokens

        logger.info("Anthropic %s: %.2fs, %s tokens", self._advisor_id, latency, token_count)
        return "\n".join(text_blocks)
