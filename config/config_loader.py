"""Load settings.yaml into typed dataclasses. Reports credential availability."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

MODES = ("chat", "debate")
SDKS = ("anthropic", "openai", "gemini", "xai", "deepseek")


@dataclass
class ModelConfig:
    name: str
    sdk: str
    model: str
    api_key_env: str
    timeout_sec: int
    max_tokens: int
    base_url: str | None = None


@dataclass
class AdvisorConfig:
    id: str
    name: str
    backend: str
    persona: str
    short_persona: str = ""
    enabled: bool = True


@dataclass
class PromptsConfig:
    debate_round: str
    synthesis: str
    moderator_persona: str


@dataclass
class DefaultsConfig:
    mode: str
    rounds: int
    max_rounds: int
    synthesizer: str


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    models: dict[str, ModelConfig]
    advisors: list[AdvisorConfig]
    prompts: PromptsConfig
    available_providers: set[str] = field(default_factory=set)


def _validate(config: AppConfig) -> None:
    defaults = config.defaults
    if defaults.mode not in MODES:
        raise ValueError(f"Unknown mode '{defaults.mode}', expected one of {', '.join(MODES)}")
    if defaults.max_rounds < 1:
        raise ValueError("max_rounds must be at least 1")
    if not 1 <= defaults.rounds <= defaults.max_rounds:
        raise ValueError(f"rounds must be between 1 and {defaults.max_rounds}, got {defaults.rounds}")

    for model in config.models.values():
        if model.sdk not in SDKS:
            raise ValueError(
                f"Backend '{model.name}' uses unknown sdk '{model.sdk}', expected one of {', '.join(SDKS)}"
            )

    seen: set[str] = set()
    for advisor in config.advisors:
        if advisor.id in seen:
            raise ValueError(f"Duplicate advisor id: {advisor.id}")
        seen.add(advisor.id)
        if advisor.backend not in config.models:
            raise ValueError(f"Advisor '{advisor.id}' references unknown backend '{advisor.backend}'")

    if defaults.synthesizer not in seen:
        raise ValueError(f"Synthesizer '{defaults.synthesizer}' is not a configured advisor")


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing and ValueError when the
    advisor, backend and default sections don't agree with each other.
    Missing API keys are only logged: a missing credential surfaces as a
    failed reply when that advisor is actually called.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults_raw = raw["defaults"]
    defaults = DefaultsConfig(
        mode=str(defaults_raw.get("mode", "chat")),
        rounds=int(defaults_raw["rounds"]),
        max_rounds=int(defaults_raw["max_rounds"]),
        synthesizer=str(defaults_raw["synthesizer"]),
    )

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        debate_round=prompts_raw["debate_round"],
        synthesis=prompts_raw["synthesis"],
        moderator_persona=str(prompts_raw["moderator_persona"]).strip(),
    )

    models: dict[str, ModelConfig] = {}
    available_providers: set[str] = set()

    for provider_name, model_raw in raw["models"].items():
        model_cfg = ModelConfig(
            name=provider_name,
            sdk=model_raw["sdk"],
            model=model_raw["model"],
            api_key_env=model_raw["api_key_env"],
            timeout_sec=int(model_raw["timeout_sec"]),
            max_tokens=int(model_raw["max_tokens"]),
            base_url=model_raw.get("base_url"),
        )
        models[provider_name] = model_cfg

        api_key = os.environ.get(model_raw["api_key_env"], "").strip()
        if api_key:
            available_providers.add(provider_name)
            logger.info("Provider available: %s", provider_name)
        else:
            logger.info(
                "Provider has no API key yet: %s (set %s in .env)",
                provider_name,
                model_raw["api_key_env"],
            )

    advisors = [
        AdvisorConfig(
            id=str(adv["id"]),
            name=str(adv["name"]),
            backend=str(adv.get("backend", adv["id"])),
            persona=str(adv["persona"]).strip(),
            short_persona=str(adv.get("short_persona", "")),
            enabled=bool(adv.get("enabled", True)),
        )
        for adv in raw["advisors"]
    ]

    config = AppConfig(
        defaults=defaults,
        models=models,
        advisors=advisors,
        prompts=prompts,
        available_providers=available_providers,
    )
    _validate(config)
    return config
