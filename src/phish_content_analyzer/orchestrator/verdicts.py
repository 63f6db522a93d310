"""Verdict normalization: one default table, canonical and fail-closed verdicts.

Every helper here builds a new `AnalysisVerdict`; callers may mutate what they
get back without affecting later requests.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from phish_content_analyzer.domain.contracts import AnalysisVerdict, RawVerdict, ThreatLevel

VERDICT_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "is_phishing": False,
        "indicators": (),
        "safety_score": 1.0,
        "explanation": "No explanation provided.",
        "threat_level": ThreatLevel.SAFE,
        "risk_factors": (),
    }
)


def no_content_verdict() -> AnalysisVerdict:
    return AnalysisVerdict(
        is_phishing=False,
        indicators=[],
        safety_score=1.0,
        explanation="No content provided for analysis.",
        threat_level=ThreatLevel.SAFE,
        risk_factors=[],
    )


def empty_output_verdict() -> AnalysisVerdict:
    """Backend returned nothing."""

    return AnalysisVerdict(
        is_phishing=True,
        indicators=["No analysis performed"],
        safety_score=0.2,
        explanation="No analysis could be performed, possibly due to technical issues. Treat with extreme caution.",
        threat_level=ThreatLevel.DANGEROUS,
        risk_factors=["Technical failure"],
    )


def failed_analysis_verdict() -> AnalysisVerdict:
    """Backend raised, returned malformed output, or looped past the turn limit."""

    return AnalysisVerdict(
        is_phishing=True,
        indicators=["Analysis failed"],
        safety_score=0.1,
        explanation="Failed to analyze content. Please treat as potentially dangerous.",
        threat_level=ThreatLevel.DANGEROUS,
        risk_factors=["Technical failure"],
    )


def _clamp_score(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def finalize(raw: RawVerdict | None) -> AnalysisVerdict:
    """Fill each missing field from `VERDICT_DEFAULTS`; `None` fails closed."""

    if raw is None:
        return empty_output_verdict()
    values: dict[str, Any] = {}
    for name, default in VERDICT_DEFAULTS.items():
        value = getattr(raw, name)
        if value is None:
            value = list(default) if isinstance(default, tuple) else default
        elif isinstance(value, list):
            value = list(value)
        values[name] = value
    values["safety_score"] = _clamp_score(values["safety_score"])
    values["explanation"] = str(values["explanation"]).strip() or VERDICT_DEFAULTS["explanation"]
    return AnalysisVerdict(**values)
