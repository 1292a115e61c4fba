"""Pure dataclasses for the roundtable session. No logic, no deps."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class TurnKind(str, Enum):
    USER_QUERY = "user_query"
    ADVISOR_REPLY = "advisor_reply"
    ROUND_MARKER = "round_marker"
    CONSENSUS_RESULT = "consensus_result"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Phase(str, Enum):
    IDLE = "idle"
    CHAT_FAN_OUT = "chat_fan_out"
    DEBATE_ROUND = "debate_round"
    SYNTHESIZING = "synthesizing"


class Mode(str, Enum):
    CHAT = "chat"
    DEBATE = "debate"


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Advisor:
    id: str
    display_name: str
    persona: str
    model_identifier: str
    backend: str
    short_persona: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class HistoryEntry:
    role: Role
    text: str


@dataclass(frozen=True)
class Turn:
    """One entry in the conversation.

    While the moderator runs, a Turn with kind CONSENSUS_RESULT and
    placeholder=True holds the consensus slot. It is replaced under the same
    id by the real result. Only is_consensus=True marks the actual consensus;
    readers should treat placeholder Turns as a progress indicator.
    """

    kind: TurnKind
    text: str
    author_id: str | None = None     # set for advisor replies and consensus
    author_name: str | None = None
    round_number: int | None = None  # set only inside debate mode
    is_consensus: bool = False
    placeholder: bool = False
    failed: bool = False
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class AdvisorRequest:
    advisor_id: str
    model: str
    persona: str
    message: str
    history: tuple[HistoryEntry, ...] = ()


@dataclass(frozen=True)
class TranscriptEntry:
    advisor_name: str
    round_number: int
    text: str
