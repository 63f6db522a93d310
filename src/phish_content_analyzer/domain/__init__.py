"""Domain models and pure helpers."""

from phish_content_analyzer.domain.contracts import (
    AnalysisRequest,
    AnalysisVerdict,
    EnrichedContent,
    RawVerdict,
    ScanResult,
    ScanUrlArgs,
    ThreatLevel,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisVerdict",
    "EnrichedContent",
    "RawVerdict",
    "ScanResult",
    "ScanUrlArgs",
    "ThreatLevel",
]
