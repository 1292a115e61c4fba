"""Pure renderers for debate-round prompts and the synthesis document."""

from collections.abc import Sequence

from roundtable.models import TranscriptEntry

_ENTRY_SEPARATOR = "\n\n---\n\n"
_NO_PREVIOUS_REPLIES = "(No advisor responded in the previous round.)"


def render_round_prompt(template: str, question: str, previous_round: Sequence[TranscriptEntry]) -> str:
    """Prompt for debate round r > 1.

    Only the replies of round r-1 go in, never those of earlier rounds.
    """
    if previous_round:
        block = "\n\n".join(f"**{entry.advisor_name}**: {entry.text}" for entry in previous_round)
    else:
        block = _NO_PREVIOUS_REPLIES
    return template.format(question=question, previous_round=block)


def render_transcript(transcript: Sequence[TranscriptEntry]) -> str:
    return _ENTRY_SEPARATOR.join(
        f"[{entry.advisor_name} - Round {entry.round_number}]: {entry.text}" for entry in transcript
    )


def render_synthesis_document(template: str, transcript: Sequence[TranscriptEntry]) -> str:
    """Moderator input: every transcript entry, then the fixed instruction."""
    return template.format(transcript=render_transcript(transcript))
