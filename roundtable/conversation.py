"""Append-only log of Turns, in creation order."""

from roundtable.models import HistoryEntry, Role, Turn, TurnKind


class ConversationState:
    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    def replace_placeholder(self, turn_id: str, turn: Turn) -> None:
        """Swap the placeholder with turn_id for turn, keeping its position.

        Only placeholder Turns may be replaced; every other Turn is final.
        """
        for index, existing in enumerate(self._turns):
            if existing.id == turn_id:
                if not existing.placeholder:
                    raise ValueError(f"Turn {turn_id} is not a placeholder")
                self._turns[index] = turn
                return
        raise KeyError(turn_id)

    def clear(self) -> None:
        self._turns.clear()

    def history(self) -> list[HistoryEntry]:
        """Replay context for chat mode.

        Advisor and consensus text is prefixed with the speaker's name so each
        model can tell the voices apart in the shared transcript. Round markers
        and placeholders are display-only.
        """
        entries: list[HistoryEntry] = []
        for turn in self._turns:
            if turn.kind is TurnKind.USER_QUERY:
                entries.append(HistoryEntry(Role.USER, turn.text))
            elif turn.kind in (TurnKind.ADVISOR_REPLY, TurnKind.CONSENSUS_RESULT) and not turn.placeholder:
                entries.append(HistoryEntry(Role.ASSISTANT, f"[{turn.author_name}]: {turn.text}"))
        return entries
