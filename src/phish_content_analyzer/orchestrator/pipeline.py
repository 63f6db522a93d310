"""Caller-facing content analysis service."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass

from phish_content_analyzer.core.logging import get_logger
from phish_content_analyzer.domain.contracts import AnalysisRequest, AnalysisVerdict
from phish_content_analyzer.orchestrator.analyzer import AnalysisOrchestrator
from phish_content_analyzer.orchestrator.normalizer import InputNormalizer
from phish_content_analyzer.orchestrator.tracing import TraceEvent, final_event, make_event
from phish_content_analyzer.orchestrator.verdicts import failed_analysis_verdict, no_content_verdict

logger = get_logger(__name__)


@dataclass
class ContentAnalysisService:
    """Normalize a request, then hand it to the orchestrator.

    `NormalizationError` propagates to the caller; once normalization succeeds
    a verdict is always returned.
    """

    normalizer: InputNormalizer
    orchestrator: AnalysisOrchestrator
    provider: str = "openai"

    def analyze_stream(self, request: AnalysisRequest) -> Generator[TraceEvent, None, None]:
        if request.is_empty():
            logger.info("analysis_skipped", reason="no_content")
            yield make_event("init", "done", "Input empty; return no-content verdict.")
            yield final_event(no_content_verdict())
            return

        content = self.normalizer.normalize(request)
        yield make_event(
            "normalize",
            "done",
            "Input normalized.",
            data={"channels": list(content.channels), "text_len": len(content.text)},
        )
        yield from self.orchestrator.analyze_stream(content)

    def analyze(self, request: AnalysisRequest) -> AnalysisVerdict:
        final: AnalysisVerdict | None = None
        for event in self.analyze_stream(request):
            if event.get("type") == "final":
                final = event["result"]
        return final if final is not None else failed_analysis_verdict()

    def analyze_content(
        self,
        text: str | None = None,
        image_data_uri: str | None = None,
        email_data_uri: str | None = None,
    ) -> AnalysisVerdict:
        return self.analyze(
            AnalysisRequest(text=text, image_payload=image_data_uri, email_payload=email_data_uri)
        )
