"""xAI Grok provider using openai SDK (OpenAI-compatible API)."""

from openai import AsyncOpenAI

from roundtable.providers.base import UpstreamError
from roundtable.providers.openai_provider import OpenAIProvider


class XAIProvider(OpenAIProvider):
    """xAI Grok provider via OpenAI-compatible API."""

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._config.base_url:
                raise UpstreamError(self._advisor_id, "base_url is required for xAI provider")
            self._client = AsyncOpenAI(
                api_key=self._api_key(),
                base_url=self._config.base_url,
                timeout=float(self._config.timeout_sec),
                max_retries=0,
            )
        return self._client
