"""Analysis orchestration: normalization, reasoning loop and verdict policy."""

from phish_content_analyzer.orchestrator.analyzer import AnalysisOrchestrator, AnalysisState
from phish_content_analyzer.orchestrator.capabilities import CapabilityRegistry, default_capability_registry
from phish_content_analyzer.orchestrator.normalizer import InputNormalizer
from phish_content_analyzer.orchestrator.pipeline import ContentAnalysisService
from phish_content_analyzer.orchestrator.verdicts import finalize

__all__ = [
    "AnalysisOrchestrator",
    "AnalysisState",
    "CapabilityRegistry",
    "ContentAnalysisService",
    "InputNormalizer",
    "default_capability_registry",
    "finalize",
]
