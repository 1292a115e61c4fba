"""Abstract base for all advisor backends, plus the failures they raise."""

import os
from abc import ABC, abstractmethod
from collections.abc import Sequence

from config.config_loader import ModelConfig
from roundtable.models import HistoryEntry, Role


class ProviderError(Exception):
    """Raised when a backend call cannot be completed."""

    def __init__(self, advisor_id: str, detail: str) -> None:
        self.advisor_id = advisor_id
        self.detail = detail
        super().__init__(f"[{advisor_id}] {detail}")


class ConfigurationError(ProviderError):
    """The backend's credential is missing. Detected when the call is made."""


class UpstreamError(ProviderError):
    """The backend answered with an error or with a body we can't use."""


class AIProvider(ABC):
    """One advisor backend behind the uniform invoke() contract."""

    def __init__(self, advisor_id: str, config: ModelConfig) -> None:
        self._advisor_id = advisor_id
        self._config = config

    def name(self) -> str:
        return self._advisor_id

    def model_string(self) -> str:
        return self._config.model

    def _api_key(self) -> str:
        api_key = os.environ.get(self._config.api_key_env, "").strip()
        if not api_key:
            raise ConfigurationError(self._advisor_id, f"{self._config.api_key_env} not configured")
        return api_key

    @abstractmethod
    async def invoke(self, persona: str, message: str, history: Sequence[HistoryEntry]) -> str:
        """Send one chat call and return the assistant text.

        Args:
            persona: System prompt defining the advisor's voice.
            message: The new user message.
            history: Prior exchange, oldest first. Empty in debate rounds.

        Returns:
            The assistant's reply text, never empty.

        Raises:
            ConfigurationError: The credential env var is unset.
            UpstreamError: On API failure or an empty/malformed response.
        """
        ...


def chat_messages(persona: str | None, message: str, history: Sequence[HistoryEntry]) -> list[dict[str, str]]:
    """Build an OpenAI-style messages list. persona=None leaves out the system entry."""
    messages: list[dict[str, str]] = []
    if persona is not None:
        messages.append({"role": "system", "content": persona})
    messages.extend({"role": entry.role.value, "content": entry.text} for entry in history)
    messages.append({"role": Role.USER.value, "content": message})
    return messages
