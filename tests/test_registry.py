"""Tests for roundtable/registry.py."""

import pytest

from config.config_loader import load_config
from roundtable.errors import UnknownAdvisorError
from roundtable.registry import AdvisorRegistry
from tests.conftest import ADVISOR_IDS, make_advisor


@pytest.fixture
def registry() -> AdvisorRegistry:
    return AdvisorRegistry(make_advisor(advisor_id) for advisor_id in ADVISOR_IDS)


def test_list_keeps_insertion_order(registry):
    assert [a.id for a in registry.list()] == ADVISOR_IDS


def test_list_is_stable_across_toggles(registry):
    registry.toggle("gemini")
    registry.toggle("claude")
    assert [a.id for a in registry.list()] == ADVISOR_IDS


def test_toggle_flips_enabled(registry):
    registry.toggle("grok")
    assert registry.get("grok").enabled is False


def test_toggle_twice_restores_state_and_leaves_others_alone(registry):
    before = {a.id: a.enabled for a in registry.list()}
    registry.toggle("gpt")
    registry.toggle("gpt")
    assert {a.id: a.enabled for a in registry.list()} == before


def test_toggle_unknown_id_is_a_no_op(registry):
    before = {a.id: a.enabled for a in registry.list()}
    registry.toggle("llama")
    assert {a.id: a.enabled for a in registry.list()} == before


def test_enabled_subset(registry):
    registry.toggle("grok")
    registry.toggle("deepseek")
    assert [a.id for a in registry.enabled_subset()] == ["claude", "gpt", "gemini"]


def test_get_unknown_raises(registry):
    with pytest.raises(UnknownAdvisorError) as exc_info:
        registry.get("llama")
    assert isinstance(exc_info.value, KeyError)
    assert "llama" in str(exc_info.value)


def test_enable_only(registry):
    registry.enable_only(["gpt", "grok"])
    assert [a.id for a in registry.enabled_subset()] == ["gpt", "grok"]


def test_enable_only_unknown_raises_without_changes(registry):
    with pytest.raises(UnknownAdvisorError):
        registry.enable_only(["gpt", "llama"])
    assert len(registry.enabled_subset()) == 5


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        AdvisorRegistry([make_advisor("gpt"), make_advisor("gpt")])


def test_from_config_uses_backend_model(settings_file):
    registry = AdvisorRegistry.from_config(load_config(settings_file))
    claude = registry.get("claude")
    assert claude.display_name == "Claude"
    assert claude.model_identifier == "claude-sonnet-4-20250514"
    assert claude.persona == "You are a strategist."
    assert registry.get("grok").enabled is False
    assert "grok" in registry
    assert len(registry) == 2
