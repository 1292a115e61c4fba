"""Failures that are reported to the caller rather than turned into replies."""


class UnknownAdvisorError(KeyError):
    """A request named an advisor id outside the registry."""

    def __init__(self, advisor_id: str) -> None:
        self.advisor_id = advisor_id
        super().__init__(advisor_id)

    def __str__(self) -> str:
        return f"Unknown advisor: {self.advisor_id}"


class SynthesisError(Exception):
    """The moderator call behind the consensus summary failed."""
