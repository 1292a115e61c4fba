"""Shared pytest fixtures."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest
import yaml

from config.config_loader import ModelConfig, PromptsConfig
from roundtable.gateway import AdvisorGateway
from roundtable.models import Advisor, HistoryEntry, Mode
from roundtable.orchestrator import RoundOrchestrator
from roundtable.providers.base import AIProvider, ProviderError
from roundtable.registry import AdvisorRegistry
from roundtable.session import Session
from roundtable.synthesis import ConsensusSynthesizer

ADVISOR_IDS = ["claude", "gpt", "gemini", "grok", "deepseek"]


@dataclass
class Call:
    persona: str
    message: str
    history: tuple[HistoryEntry, ...]


def fake_model_config(name: str = "test_model") -> ModelConfig:
    return ModelConfig(
        name=name,
        sdk="test",
        model=f"{name}-model-1",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
    )


class FakeProvider(AIProvider):
    """Test double AIProvider with scripted replies, delays and failures.

    `replies` is consumed one per call; the last one repeats. Setting `gate`
    makes every call wait for the event before answering.
    """

    def __init__(
        self,
        advisor_id: str,
        replies: Sequence[str] | None = None,
        delay: float = 0.0,
        error: ProviderError | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        super().__init__(advisor_id, fake_model_config(advisor_id))
        self._replies = list(replies) if replies else [f"Response from {advisor_id}"]
        self.delay = delay
        self.error = error
        self.gate = gate
        self.calls: list[Call] = []

    async def invoke(self, persona: str, message: str, history: Sequence[HistoryEntry]) -> str:
        self.calls.append(Call(persona, message, tuple(history)))
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if len(self._replies) > 1:
            return self._replies.pop(0)
        return self._replies[0]


def make_advisor(advisor_id: str, enabled: bool = True) -> Advisor:
    return Advisor(
        id=advisor_id,
        display_name=advisor_id.title(),
        persona=f"You are the {advisor_id} advisor.",
        model_identifier=f"{advisor_id}-model-1",
        backend=advisor_id,
        short_persona=f"{advisor_id} perspective",
        enabled=enabled,
    )


def make_orchestrator(
    providers: Sequence[AIProvider],
    prompts: PromptsConfig,
    mode: Mode = Mode.CHAT,
    rounds: int = 2,
    moderator: AIProvider | None = None,
    registry: AdvisorRegistry | None = None,
) -> RoundOrchestrator:
    """Wire a session around fake providers. The moderator defaults to the first provider."""
    registry = registry or AdvisorRegistry(make_advisor(p.name()) for p in providers)
    gateway_providers = {p.name(): p for p in providers}
    moderator = moderator or providers[0]
    gateway_providers.setdefault(moderator.name(), moderator)
    gateway = AdvisorGateway(gateway_providers)
    session = Session(registry, mode=mode, rounds=rounds, max_rounds=3)
    synthesizer = ConsensusSynthesizer(gateway, moderator.name(), moderator.model_string(), prompts)
    return RoundOrchestrator(session, gateway, synthesizer, prompts)


@pytest.fixture
def sample_model_config() -> ModelConfig:
    return fake_model_config()


@pytest.fixture
def sample_prompts_config() -> PromptsConfig:
    return PromptsConfig(
        debate_round="Question: {question}\n\nPrevious round:\n{previous_round}\n\nRespond to the others.",
        synthesis="Transcript:\n{transcript}\n\nList five points of agreement.",
        moderator_persona="You are a neutral moderator.",
    )


@pytest.fixture
def five_providers() -> list[FakeProvider]:
    return [FakeProvider(advisor_id) for advisor_id in ADVISOR_IDS]


@pytest.fixture
def two_providers() -> list[FakeProvider]:
    return [FakeProvider("claude"), FakeProvider("gpt")]


@pytest.fixture
def settings_dict() -> dict:
    """A minimal valid settings.yaml as a dict."""
    return {
        "defaults": {
            "mode": "chat",
            "rounds": 2,
            "max_rounds": 3,
            "synthesizer": "claude",
        },
        "models": {
            "claude": {
                "sdk": "anthropic",
                "model": "claude-sonnet-4-20250514",
                "api_key_env": "TEST_CLAUDE_KEY",
                "timeout_sec": 120,
                "max_tokens": 1024,
            },
            "grok": {
                "sdk": "xai",
                "model": "grok-beta",
                "api_key_env": "TEST_XAI_KEY",
                "timeout_sec": 60,
                "max_tokens": 512,
                "base_url": "https://api.x.ai/v1",
            },
        },
        "advisors": [
            {"id": "claude", "name": "Claude", "persona": "You are a strategist.", "short_persona": "Strategist"},
            {"id": "grok", "name": "Grok", "persona": "You are a contrarian.", "enabled": False},
        ],
        "prompts": {
            "debate_round": "Q: {question}\n{previous_round}",
            "synthesis": "{transcript}\nSummarize.",
            "moderator_persona": "You are a neutral moderator.",
        },
    }


@pytest.fixture
def settings_file(tmp_path: Path, settings_dict: dict) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump(settings_dict), encoding="utf-8")
    return path
