"""Catalog of advisors for one session, with their enabled flags."""

import logging
from collections.abc import Iterable

from config.config_loader import AppConfig
from roundtable.errors import UnknownAdvisorError
from roundtable.models import Advisor

logger = logging.getLogger(__name__)


class AdvisorRegistry:
    def __init__(self, advisors: Iterable[Advisor]) -> None:
        self._advisors: dict[str, Advisor] = {}
        for advisor in advisors:
            if advisor.id in self._advisors:
                raise ValueError(f"Duplicate advisor id: {advisor.id}")
            self._advisors[advisor.id] = advisor

    @classmethod
    def from_config(cls, config: AppConfig) -> "AdvisorRegistry":
        return cls(
            Advisor(
                id=adv.id,
                display_name=adv.name,
                persona=adv.persona,
                model_identifier=config.models[adv.backend].model,
                backend=adv.backend,
                short_persona=adv.short_persona,
                enabled=adv.enabled,
            )
            for adv in config.advisors
        )

    def __contains__(self, advisor_id: object) -> bool:
        return advisor_id in self._advisors

    def __len__(self) -> int:
        return len(self._advisors)

    def get(self, advisor_id: str) -> Advisor:
        try:
            return self._advisors[advisor_id]
        except KeyError:
            raise UnknownAdvisorError(advisor_id) from None

    def toggle(self, advisor_id: str) -> None:
        """Flip one advisor's enabled flag. Unknown ids are ignored."""
        advisor = self._advisors.get(advisor_id)
        if advisor is None:
            logger.debug("Ignoring toggle for unknown advisor %s", advisor_id)
            return
        advisor.enabled = not advisor.enabled

    def enable_only(self, advisor_ids: Iterable[str]) -> None:
        wanted = set(advisor_ids)
        unknown = sorted(wanted - self._advisors.keys())
        if unknown:
            raise UnknownAdvisorError(unknown[0])
        for advisor in self._advisors.values():
            advisor.enabled = advisor.id in wanted

    def enabled_subset(self) -> list[Advisor]:
        return [a for a in self._advisors.values() if a.enabled]

    # Kept last so the builtin is still in scope for the annotations above.
    def list(self) -> list[Advisor]:
        return list(self._advisors.values())
