"""Consensus synthesis: render the debate transcript, ask the moderator, return its text."""

import logging
from collections.abc import Sequence

from config.config_loader import PromptsConfig
from roundtable.errors import SynthesisError, UnknownAdvisorError
from roundtable.gateway import AdvisorGateway
from roundtable.models import AdvisorRequest, TranscriptEntry
from roundtable.prompts import render_synthesis_document
from roundtable.providers.base import ProviderError

logger = logging.getLogger(__name__)

SYNTHESIS_FALLBACK = "Unable to synthesize consensus. Please review the individual responses above."


class ConsensusSynthesizer:
    """A single moderator call over the full multi-round transcript.

    The returned text is not parsed: the five ranked agreement points and the
    Strong/Moderate/Emerging labels are asked for in the prompt only.
    """

    def __init__(
        self,
        gateway: AdvisorGateway,
        moderator_id: str,
        moderator_model: str,
        prompts: PromptsConfig,
    ) -> None:
        self._gateway = gateway
        self.moderator_id = moderator_id
        self._moderator_model = moderator_model
        self._prompts = prompts

    async def synthesize(self, transcript: Sequence[TranscriptEntry]) -> str:
        """Return the moderator's consensus summary.

        Raises:
            SynthesisError: If the moderator call fails or returns empty content.
        """
        if not transcript:
            raise SynthesisError("No advisor replies to synthesize")

        request = AdvisorRequest(
            advisor_id=self.moderator_id,
            model=self._moderator_model,
            persona=self._prompts.moderator_persona,
            message=render_synthesis_document(self._prompts.synthesis, transcript),
        )

        logger.info("Running synthesis via %s over %d entries", self.moderator_id, len(transcript))

        try:
            text = await self._gateway.call(request)
        except (ProviderError, UnknownAdvisorError) as exc:
            raise SynthesisError(f"Synthesizer {self.moderator_id} failed: {exc}") from exc

        if not text.strip():
            raise SynthesisError(f"Synthesizer {self.moderator_id} returned empty content")
        return text
