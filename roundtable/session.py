"""Session state: advisors, conversation and the status of the submission in flight.

All mutation goes through the named operations below. Each one completes
without awaiting, so resolutions arriving in any order on the event loop can
never observe a half-applied change.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from roundtable.conversation import ConversationState
from roundtable.models import Mode, Phase, Turn
from roundtable.registry import AdvisorRegistry

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    TURN_APPENDED = "turn_appended"
    TURN_REPLACED = "turn_replaced"
    PENDING_CHANGED = "pending_changed"
    PHASE_CHANGED = "phase_changed"


Listener = Callable[[SessionEvent, Turn | None], None]


class Session:
    def __init__(
        self,
        registry: AdvisorRegistry,
        mode: Mode = Mode.CHAT,
        rounds: int = 2,
        max_rounds: int = 3,
    ) -> None:
        self.registry = registry
        self.conversation = ConversationState()
        self.max_rounds = max_rounds
        self.mode = mode
        self.rounds = 1
        self.set_rounds(rounds)

        self.phase = Phase.IDLE
        self.current_round = 0
        self.synthesizing = False
        self._pending: set[str] = set()
        self._listeners: list[Listener] = []

    # --- read side -------------------------------------------------------

    @property
    def turns(self) -> tuple[Turn, ...]:
        return self.conversation.turns

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._pending)

    @property
    def is_idle(self) -> bool:
        return self.phase is Phase.IDLE

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, event: SessionEvent, turn: Turn | None = None) -> None:
        # A failing listener must not abort the fan-out it is observing.
        for listener in self._listeners:
            try:
                listener(event, turn)
            except Exception:
                logger.exception("Session listener failed on %s", event.value)

    # --- configuration ---------------------------------------------------

    def toggle_advisor(self, advisor_id: str) -> None:
        self.registry.toggle(advisor_id)

    def set_mode(self, mode: Mode | str) -> None:
        self.mode = Mode(mode)

    def set_rounds(self, rounds: int) -> None:
        if not 1 <= rounds <= self.max_rounds:
            raise ValueError(f"rounds must be between 1 and {self.max_rounds}, got {rounds}")
        self.rounds = rounds

    # --- orchestration mutations -----------------------------------------

    def append_turn(self, turn: Turn) -> None:
        self.conversation.append(turn)
        self._notify(SessionEvent.TURN_APPENDED, turn)

    def replace_placeholder(self, placeholder_id: str, turn: Turn) -> None:
        self.conversation.replace_placeholder(placeholder_id, turn)
        self._notify(SessionEvent.TURN_REPLACED, turn)

    def begin_chat(self) -> None:
        self._set_phase(Phase.CHAT_FAN_OUT)

    def begin_round(self, round_number: int) -> None:
        self.current_round = round_number
        self._set_phase(Phase.DEBATE_ROUND)

    def begin_synthesis(self) -> None:
        self.synthesizing = True
        self._set_phase(Phase.SYNTHESIZING)

    def await_advisors(self, advisor_ids: Iterable[str]) -> None:
        self._pending = set(advisor_ids)
        self._notify(SessionEvent.PENDING_CHANGED)

    def settle_advisor(self, advisor_id: str, turn: Turn) -> None:
        """Record one advisor's result: append its Turn and drop it from pending."""
        if advisor_id not in self._pending:
            raise ValueError(f"Advisor {advisor_id} is not pending")
        self.conversation.append(turn)
        self._pending.discard(advisor_id)
        self._notify(SessionEvent.TURN_APPENDED, turn)
        self._notify(SessionEvent.PENDING_CHANGED)

    def finish(self) -> None:
        """Back to Idle, whatever state the submission stopped in."""
        if self._pending:
            logger.warning("Finishing with advisors still pending: %s", ", ".join(sorted(self._pending)))
        self._pending.clear()
        self.current_round = 0
        self.synthesizing = False
        self._set_phase(Phase.IDLE)

    def clear(self) -> bool:
        if not self.is_idle:
            logger.warning("Cannot clear the conversation while a submission is in flight")
            return False
        self.conversation.clear()
        return True

    def _set_phase(self, phase: Phase) -> None:
        self.phase = phase
        self._notify(SessionEvent.PHASE_CHANGED)
