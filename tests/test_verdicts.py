from phish_content_analyzer.domain.contracts import RawVerdict, ThreatLevel
from phish_content_analyzer.orchestrator.verdicts import (
    empty_output_verdict,
    no_content_verdict,
    VERDICT_DEFAULTS,
    finalize,
)


def test_finalize_fills_every_missing_field():
    verdict = finalize(RawVerdict())
    assert verdict.to_payload() == {
        "isPhishing": False,
        "indicators": [],
        "safetyScore": 1.0,
        "explanation": "No explanation provided.",
        "threatLevel": "Safe",
        "riskFactors": [],
    }


def test_finalize_defaults_per_field_and_keeps_provided_values():
    raw = RawVerdict.model_validate(
        {"isPhishing": True, "indicators": ["Urgency cue"], "safetyScore": 0.3, "threatLevel": "Suspicious"}
    )
    verdict = finalize(raw)
    assert verdict.risk_factors == []
    assert verdict.indicators == ["Urgency cue"]
    assert verdict.is_phishing is True
    assert verdict.threat_level is ThreatLevel.SUSPICIOUS
    assert verdict.explanation == "No explanation provided."


def test_finalize_keeps_indicators_when_threat_level_missing():
    verdict = finalize(RawVerdict.model_validate({"indicators": ["Spoofed sender"]}))
    assert verdict.indicators == ["Spoofed sender"]
    assert verdict.threat_level is ThreatLevel.SAFE


def test_finalize_none_fails_closed():
    verdict = finalize(None)
    assert verdict == empty_output_verdict()
    assert verdict.is_phishing is True
    assert verdict.threat_level is ThreatLevel.DANGEROUS
    assert 0.1 <= verdict.safety_score <= 0.2
    assert verdict.risk_factors == ["Technical failure"]


def test_finalize_clamps_score_without_reconciling_fields():
    verdict = finalize(RawVerdict.model_validate({"safetyScore": 7, "isPhishing": False, "threatLevel": "dangerous"}))
    assert verdict.safety_score == 1.0
    assert verdict.is_phishing is False
    assert verdict.threat_level is ThreatLevel.DANGEROUS


def test_default_table_lists_each_verdict_field_once():
    assert set(VERDICT_DEFAULTS) == {
        "is_phishing",
        "indicators",
        "safety_score",
        "explanation",
        "threat_level",
        "risk_factors",
    }


def test_no_content_verdict_payload():
    assert no_content_verdict().to_payload() == {
        "isPhishing": False,
        "indicators": [],
        "safetyScore": 1.0,
        "explanation": "No content provided for analysis.",
        "threatLevel": "Safe",
        "riskFactors": [],
    }
