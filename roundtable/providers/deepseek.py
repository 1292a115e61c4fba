"""DeepSeek provider. The chat endpoint speaks the OpenAI wire format."""

from openai import AsyncOpenAI

from roundtable.providers.openai_provider import OpenAIProvider

_DEFAULT_BASE_URL = "https://api.deepseek.com"


class DeepSeekProvider(OpenAIProvider):
    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key(),
                base_url=self._config.base_url or _DEFAULT_BASE_URL,
                timeout=float(self._config.timeout_sec),
                max_retries=0,
            )
        return self._client
