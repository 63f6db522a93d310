"""Input normalization: turn text, image and email channels into one text blob."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from phish_content_analyzer.core.errors import CollaboratorFailureError, MalformedPayloadError
from phish_content_analyzer.core.logging import get_logger
from phish_content_analyzer.domain.contracts import AnalysisRequest, EnrichedContent
from phish_content_analyzer.domain.data_uri import parse_data_uri

logger = get_logger(__name__)

TextExtractor = Callable[[str], str]
ContainerReader = Callable[[str], str]

IMAGE_LABEL = "Image Text:"
EMAIL_LABEL = "Email Content:"


@dataclass(frozen=True)
class InputNormalizer:
    """Validate payloads and assemble `EnrichedContent`.

    Payload problems raise `MalformedPayloadError`; collaborator failures are
    re-raised as `CollaboratorFailureError`. No retries happen here.
    """

    extract_text: TextExtractor
    read_container: ContainerReader

    def normalize(self, request: AnalysisRequest) -> EnrichedContent:
        # Validate every payload before calling any collaborator.
        if request.image_payload:
            parse_data_uri(request.image_payload, label="image")
        if request.email_payload:
            parse_data_uri(request.email_payload, label=".eml file")

        parts = [request.text or ""]
        channels: list[str] = ["text"] if (request.text or "").strip() else []
        images: list[str] = []

        if request.image_payload:
            image_text = self._call(self.extract_text, request.image_payload, channel="image")
            parts.append(f"{IMAGE_LABEL} {image_text}")
            channels.append("image")
            images.append(request.image_payload.strip())

        if request.email_payload:
            email_text = self._call(self.read_container, request.email_payload, channel="email")
            parts.append(f"{EMAIL_LABEL} {email_text}")
            channels.append("email")

        content = EnrichedContent(
            text="\n".join(parts).strip(),
            channels=tuple(channels),
            images=tuple(images),
        )
        logger.info("input_normalized", channels=list(content.channels), chars=len(content.text))
        return content

    @staticmethod
    def _call(collaborator: Callable[[str], str], payload: str, *, channel: str) -> str:
        try:
            return collaborator(payload)
        except MalformedPayloadError:
            raise
        except Exception as exc:
            logger.warning("collaborator_failed", channel=channel, error=type(exc).__name__)
            raise CollaboratorFailureError(
                f"Failed to read {channel} content: {exc}"
            ) from exc
