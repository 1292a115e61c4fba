"""Round orchestration: chat fan-out, sequential debate rounds, consensus step."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from config.config_loader import AppConfig, PromptsConfig
from roundtable.errors import SynthesisError
from roundtable.gateway import AdvisorGateway, build_gateway
from roundtable.models import (
    Advisor,
    AdvisorRequest,
    HistoryEntry,
    Mode,
    TranscriptEntry,
    Turn,
    TurnKind,
)
from roundtable.prompts import render_round_prompt
from roundtable.providers.base import ProviderError
from roundtable.registry import AdvisorRegistry
from roundtable.session import Session
from roundtable.synthesis import SYNTHESIS_FALLBACK, ConsensusSynthesizer

logger = logging.getLogger(__name__)

FAILURE_PREFIX = "Unable to respond:"
SYNTHESIZING_TEXT = "Synthesizing consensus…"
CONSENSUS_AUTHOR = "Consensus"


@dataclass(frozen=True)
class _Settlement:
    """Message a dispatch task posts back when its call settles."""

    advisor: Advisor
    text: str | None = None
    error: ProviderError | None = None


class RoundOrchestrator:
    """Drives one submission at a time against the enabled advisors.

    Every advisor call runs in its own task; when a call settles the task
    posts a _Settlement to a queue and the orchestrator applies it to the
    session, one message at a time, in arrival order.
    """

    def __init__(
        self,
        session: Session,
        gateway: AdvisorGateway,
        synthesizer: ConsensusSynthesizer,
        prompts: PromptsConfig,
    ) -> None:
        self.session = session
        self._gateway = gateway
        self._synthesizer = synthesizer
        self._prompts = prompts

    @classmethod
    def from_config(cls, config: AppConfig) -> "RoundOrchestrator":
        registry = AdvisorRegistry.from_config(config)
        session = Session(
            registry,
            mode=Mode(config.defaults.mode),
            rounds=config.defaults.rounds,
            max_rounds=config.defaults.max_rounds,
        )
        gateway = build_gateway(config)
        moderator = registry.get(config.defaults.synthesizer)
        synthesizer = ConsensusSynthesizer(gateway, moderator.id, moderator.model_identifier, config.prompts)
        return cls(session, gateway, synthesizer, config.prompts)

    async def submit(self, text: str) -> list[Turn]:
        """Run one submission in the session's current mode.

        Returns the Turns this submission added, in conversation order. A
        submission made while another is in flight, with blank text, or with
        no advisor enabled is ignored and returns [].

        Raises:
            UnknownAdvisorError: An enabled advisor has no backend. Raised
                before any Turn is added or any remote call is made.
        """
        query = text.strip()
        if not self.session.is_idle:
            logger.warning("Submission ignored: a %s is still in progress", self.session.phase.value)
            return []
        if not query:
            logger.warning("Submission ignored: empty question")
            return []
        advisors = self.session.registry.enabled_subset()
        if not advisors:
            logger.warning("Submission ignored: no advisors enabled")
            return []
        for advisor in advisors:
            self._gateway.check(advisor.id)

        start = len(self.session.conversation)
        try:
            if self.session.mode is Mode.DEBATE:
                await self._run_debate(query, advisors, self.session.rounds)
            else:
                await self._run_chat(query, advisors)
        finally:
            self.session.finish()
        return list(self.session.turns[start:])

    async def _run_chat(self, query: str, advisors: list[Advisor]) -> None:
        self.session.begin_chat()
        history = self.session.conversation.history()
        self.session.append_turn(Turn(kind=TurnKind.USER_QUERY, text=query))

        logger.info("Chat fan-out to %d advisors", len(advisors))
        replies = await self._fan_out(advisors, query, history, round_number=None)
        logger.info("Chat complete: %d/%d advisors responded", len(replies), len(advisors))

    async def _run_debate(self, query: str, advisors: list[Advisor], total_rounds: int) -> None:
        self.session.append_turn(Turn(kind=TurnKind.USER_QUERY, text=query))

        transcript: list[TranscriptEntry] = []
        previous: list[TranscriptEntry] = []
        for round_num in range(1, total_rounds + 1):
            self.session.begin_round(round_num)
            self.session.append_turn(
                Turn(
                    kind=TurnKind.ROUND_MARKER,
                    text=f"Round {round_num} of {total_rounds}",
                    round_number=round_num,
                )
            )

            if round_num == 1:
                prompt = query
            else:
                prompt = render_round_prompt(self._prompts.debate_round, query, previous)

            logger.info("Starting round %d with %d advisors", round_num, len(advisors))
            # Rounds are self-contained: context travels in the prompt, never as history.
            previous = await self._fan_out(advisors, prompt, [], round_number=round_num)
            transcript.extend(previous)
            logger.info("Round %d complete: %d/%d advisors responded", round_num, len(previous), len(advisors))

        await self._run_synthesis(transcript, total_rounds)

    async def _fan_out(
        self,
        advisors: Sequence[Advisor],
        message: str,
        history: Sequence[HistoryEntry],
        round_number: int | None,
    ) -> list[TranscriptEntry]:
        """Call every advisor concurrently; return the successful replies in arrival order."""
        queue: asyncio.Queue[_Settlement] = asyncio.Queue()
        self.session.await_advisors(a.id for a in advisors)

        replies: list[TranscriptEntry] = []
        async with asyncio.TaskGroup() as group:
            for advisor in advisors:
                group.create_task(self._dispatch(advisor, message, tuple(history), queue))
            for _ in advisors:
                settlement = await queue.get()
                self.session.settle_advisor(settlement.advisor.id, _reply_turn(settlement, round_number))
                if settlement.error is None:
                    replies.append(
                        TranscriptEntry(
                            advisor_name=settlement.advisor.display_name,
                            round_number=round_number or 0,
                            text=settlement.text or "",
                        )
                    )
        return replies

    async def _dispatch(
        self,
        advisor: Advisor,
        message: str,
        history: tuple[HistoryEntry, ...],
        queue: "asyncio.Queue[_Settlement]",
    ) -> None:
        request = AdvisorRequest(
            advisor_id=advisor.id,
            model=advisor.model_identifier,
            persona=advisor.persona,
            message=message,
            history=history,
        )
        try:
            text = await self._gateway.call(request)
        except ProviderError as exc:
            logger.warning("Advisor %s failed: %s", advisor.id, exc.detail)
            queue.put_nowait(_Settlement(advisor, error=exc))
        else:
            queue.put_nowait(_Settlement(advisor, text=text))

    async def _run_synthesis(self, transcript: list[TranscriptEntry], total_rounds: int) -> None:
        self.session.begin_synthesis()
        moderator_id = self._synthesizer.moderator_id
        placeholder = Turn(
            kind=TurnKind.CONSENSUS_RESULT,
            text=SYNTHESIZING_TEXT,
            author_id=moderator_id,
            author_name=CONSENSUS_AUTHOR,
            round_number=total_rounds,
            placeholder=True,
        )
        self.session.append_turn(placeholder)

        failed = False
        try:
            text = await self._synthesizer.synthesize(transcript)
        except SynthesisError as exc:
            logger.warning("Synthesis failed: %s", exc)
            text = SYNTHESIS_FALLBACK
            failed = True

        self.session.replace_placeholder(
            placeholder.id,
            Turn(
                kind=TurnKind.CONSENSUS_RESULT,
                text=text,
                author_id=moderator_id,
                author_name=CONSENSUS_AUTHOR,
                round_number=total_rounds,
                is_consensus=True,
                failed=failed,
                id=placeholder.id,
            ),
        )


def _reply_turn(settlement: _Settlement, round_number: int | None) -> Turn:
    advisor = settlement.advisor
    if settlement.error is not None:
        text = f"{FAILURE_PREFIX} {settlement.error.detail}"
    else:
        text = settlement.text or ""
    return Turn(
        kind=TurnKind.ADVISOR_REPLY,
        text=text,
        author_id=advisor.id,
        author_name=advisor.display_name,
        round_number=round_number,
        failed=settlement.error is not None,
    )
