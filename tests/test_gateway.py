"""Tests for roundtable/gateway.py."""

import pytest

from config.config_loader import load_config
from roundtable.errors import UnknownAdvisorError
from roundtable.gateway import AdvisorGateway, build_gateway
from roundtable.models import AdvisorRequest, HistoryEntry, Role
from roundtable.providers.anthropic import AnthropicProvider
from roundtable.providers.base import UpstreamError
from roundtable.providers.deepseek import DeepSeekProvider
from roundtable.providers.gemini import GeminiProvider
from roundtable.providers.openai_provider import OpenAIProvider
from roundtable.providers.xai import XAIProvider
from tests.conftest import FakeProvider


def _request(advisor_id: str, history=()) -> AdvisorRequest:
    return AdvisorRequest(
        advisor_id=advisor_id,
        model=f"{advisor_id}-model-1",
        persona="You are terse.",
        message="Should we expand to Europe?",
        history=tuple(history),
    )


async def test_call_routes_to_the_named_provider():
    claude = FakeProvider("claude", ["From Claude"])
    gpt = FakeProvider("gpt", ["From GPT"])
    gateway = AdvisorGateway({"claude": claude, "gpt": gpt})

    history = [HistoryEntry(Role.USER, "earlier")]
    assert await gateway.call(_request("gpt", history)) == "From GPT"
    assert claude.calls == []
    assert gpt.calls[0].persona == "You are terse."
    assert gpt.calls[0].message == "Should we expand to Europe?"
    assert gpt.calls[0].history == tuple(history)


async def test_unknown_advisor_fails_before_any_call():
    claude = FakeProvider("claude")
    gateway = AdvisorGateway({"claude": claude})
    with pytest.raises(UnknownAdvisorError):
        await gateway.call(_request("llama"))
    assert claude.calls == []


async def test_unexpected_exception_becomes_upstream_error():
    broken = FakeProvider("gpt")

    async def explode(persona, message, history):
        raise KeyError("choices")

    broken.invoke = explode  # type: ignore[method-assign]
    gateway = AdvisorGateway({"gpt": broken})
    with pytest.raises(UpstreamError) as exc_info:
        await gateway.call(_request("gpt"))
    assert exc_info.value.advisor_id == "gpt"
    assert "Unexpected error" in exc_info.value.detail


async def test_provider_errors_pass_through_unchanged():
    error = UpstreamError("gpt", "HTTP 500")
    gateway = AdvisorGateway({"gpt": FakeProvider("gpt", error=error)})
    with pytest.raises(UpstreamError) as exc_info:
        await gateway.call(_request("gpt"))
    assert exc_info.value is error


def test_check_and_contains():
    gateway = AdvisorGateway({"claude": FakeProvider("claude")})
    assert "claude" in gateway
    assert "gpt" not in gateway
    gateway.check("claude")
    with pytest.raises(UnknownAdvisorError):
        gateway.check("gpt")


def test_build_gateway_picks_provider_per_sdk(monkeypatch):
    # No credentials needed to build: keys are read when a call is made.
    for env in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "GOOGLE_API_KEY", "XAI_API_KEY", "DEEPSEEK_API_KEY"):
        monkeypatch.delenv(env, raising=False)
    gateway = build_gateway(load_config())
    expected = {
        "claude": AnthropicProvider,
        "gpt": OpenAIProvider,
        "gemini": GeminiProvider,
        "grok": XAIProvider,
        "deepseek": DeepSeekProvider,
    }
    for advisor_id, provider_cls in expected.items():
        assert advisor_id in gateway
        assert type(gateway._providers[advisor_id]) is provider_cls


def test_build_gateway_skips_unknown_sdk(settings_file):
    config = load_config(settings_file)
    config.models["grok"].sdk = "carrier-pigeon"
    gateway = build_gateway(config)
    assert "claude" in gateway
    assert "grok" not in gateway
