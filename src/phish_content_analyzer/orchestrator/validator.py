"""Consistency guardrails for final verdicts.

The checks only report issues; verdict values are never rewritten here.
"""

from __future__ import annotations

from dataclasses import dataclass

from phish_content_analyzer.domain.contracts import AnalysisVerdict, ThreatLevel

LOW_SAFETY_SCORE = 0.3
HIGH_SAFETY_SCORE = 0.7


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    severity: str = "warning"


class ConsistencyValidator:
    """Cross-field checks between isPhishing, threatLevel and safetyScore."""

    def validate(self, verdict: AnalysisVerdict) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        level = verdict.threat_level
        score = verdict.safety_score

        if level is ThreatLevel.DANGEROUS and not verdict.is_phishing:
            issues.append(
                ValidationIssue(
                    code="dangerous_not_phishing",
                    message="Threat level is Dangerous but isPhishing is false.",
                )
            )
        if level is ThreatLevel.SAFE and verdict.is_phishing:
            issues.append(
                ValidationIssue(
                    code="safe_but_phishing",
                    message="Threat level is Safe but isPhishing is true.",
                )
            )
        if score <= LOW_SAFETY_SCORE and not verdict.is_phishing:
            issues.append(
                ValidationIssue(
                    code="low_score_not_phishing",
                    message=f"Safety score {score:.2f} is low but isPhishing is false.",
                )
            )
        if score >= HIGH_SAFETY_SCORE and level is ThreatLevel.DANGEROUS:
            issues.append(
                ValidationIssue(
                    code="high_score_dangerous",
                    message=f"Safety score {score:.2f} is high but threat level is Dangerous.",
                )
            )
        if verdict.is_phishing and not verdict.indicators:
            issues.append(
                ValidationIssue(
                    code="missing_indicators",
                    message="Phishing verdict should include at least one indicator.",
                )
            )
        return issues
