"""Route advisor requests to the provider registered for each advisor id."""

import logging
from collections.abc import Mapping

from config.config_loader import AppConfig
from roundtable.errors import UnknownAdvisorError
from roundtable.models import AdvisorRequest
from roundtable.providers.anthropic import AnthropicProvider
from roundtable.providers.base import AIProvider, ProviderError, UpstreamError
from roundtable.providers.deepseek import DeepSeekProvider
from roundtable.providers.gemini import GeminiProvider
from roundtable.providers.openai_provider import OpenAIProvider
from roundtable.providers.xai import XAIProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[AIProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
    "xai": XAIProvider,
    "deepseek": DeepSeekProvider,
}


class AdvisorGateway:
    """Stateless dispatch from an AdvisorRequest to the matching provider."""

    def __init__(self, providers: Mapping[str, AIProvider]) -> None:
        self._providers = dict(providers)

    def __contains__(self, advisor_id: object) -> bool:
        return advisor_id in self._providers

    def check(self, advisor_id: str) -> None:
        if advisor_id not in self._providers:
            raise UnknownAdvisorError(advisor_id)

    async def call(self, request: AdvisorRequest) -> str:
        """Invoke the provider for request.advisor_id.

        Raises:
            UnknownAdvisorError: No provider for that id. No remote call is made.
            ProviderError: ConfigurationError or UpstreamError from the backend.
        """
        self.check(request.advisor_id)
        provider = self._providers[request.advisor_id]
        logger.debug("Calling %s (%s)", request.advisor_id, request.model)
        try:
            return await provider.invoke(request.persona, request.message, request.history)
        except ProviderError:
            raise
        except Exception as exc:
            raise UpstreamError(request.advisor_id, f"Unexpected error: {exc}") from exc


def build_gateway(config: AppConfig) -> AdvisorGateway:
    """One provider per configured advisor, chosen by its backend's sdk."""
    providers: dict[str, AIProvider] = {}
    for advisor in config.advisors:
        model_cfg = config.models[advisor.backend]
        provider_cls = PROVIDER_CLASSES.get(model_cfg.sdk)
        if provider_cls is None:
            logger.warning("Advisor '%s' uses unknown sdk '%s', skipping", advisor.id, model_cfg.sdk)
            continue
        providers[advisor.id] = provider_cls(advisor.id, model_cfg)
    return AdvisorGateway(providers)
