from __future__ import annotations

import base64
import json
from typing import Any

import pytest

from phish_content_analyzer.domain.contracts import RawVerdict, ScanResult
from phish_content_analyzer.domain.url.extract import extract_urls
from phish_content_analyzer.orchestrator.analyzer import AnalysisOrchestrator
from phish_content_analyzer.orchestrator.backend import BackendTurn, ToolCall
from phish_content_analyzer.orchestrator.capabilities import default_capability_registry
from phish_content_analyzer.orchestrator.normalizer import InputNormalizer
from phish_content_analyzer.orchestrator.pipeline import ContentAnalysisService
from phish_content_analyzer.orchestrator.tool_executor import ToolExecutor


def data_uri(data: bytes | str, mime_type: str = "text/plain") -> str:
    raw = data.encode("utf-8") if isinstance(data, str) else data
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


def tool_turn(*urls: str, prefix: str = "call") -> BackendTurn:
    calls = tuple(
        ToolCall(id=f"{prefix}_{idx}", name="scanURL", arguments=json.dumps({"url": url}))
        for idx, url in enumerate(urls)
    )
    return BackendTurn(
        tool_calls=calls,
        assistant_message={
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {"id": call.id, "type": "function", "function": {"name": call.name, "arguments": call.arguments}}
                for call in calls
            ],
        },
    )


def final_turn(**fields: Any) -> BackendTurn:
    return BackendTurn(output=RawVerdict.model_validate(fields))


class ScriptedBackend:
    """Replays a fixed list of turns; exceptions in the script are raised."""

    def __init__(self, *turns: BackendTurn | Exception) -> None:
        self.turns = list(turns)
        self.calls: list[list[dict[str, Any]]] = []

    def complete(self, messages, tools):
        self.calls.append([dict(item) for item in messages])
        if not self.turns:
            raise AssertionError("backend called more often than scripted")
        turn = self.turns.pop(0)
        if isinstance(turn, Exception):
            raise turn
        return turn


class HeuristicBackend:
    """Deterministic stand-in for a reasoning model.

    First turn scans every URL in the user message; the final turn scores urgency
    and credential cues plus unsafe scan results.
    """

    URGENCY = ("immediately", "urgent", "act now", "within 24 hours")
    CREDENTIALS = ("log in", "login", "password", "verify your account", "bank details")

    def __init__(self) -> None:
        self.calls = 0

    def complete(self, messages, tools):
        self.calls += 1
        user_text = next(item["content"] for item in messages if item["role"] == "user")
        tool_results = [json.loads(item["content"]) for item in messages if item["role"] == "tool"]
        urls = extract_urls(user_text)
        if urls and not tool_results:
            return tool_turn(*urls)

        lowered = user_text.lower()
        indicators: list[str] = []
        if any(token in lowered for token in self.URGENCY):
            indicators.append("Urgency cue: demands immediate action")
        if any(token in lowered for token in self.CREDENTIALS):
            indicators.append("Request for account credentials")
        unsafe = [item for item in tool_results if not item["isSafe"]]
        if unsafe:
            indicators.append("Suspicious domain flagged by URL scan")

        if unsafe or len(indicators) >= 2:
            return final_turn(
                isPhishing=True,
                indicators=indicators,
                safetyScore=0.15,
                explanation="Urgent credential request with a malicious link.",
                threatLevel="Dangerous",
                riskFactors=[item.split(":")[0] for item in indicators],
            )
        return final_turn(
            isPhishing=False,
            indicators=[],
            safetyScore=0.95,
            explanation="Ordinary conversational message.",
            threatLevel="Safe",
            riskFactors=[],
        )


def mock_oracle(url: str) -> ScanResult:
    if "suspicious" in url:
        return ScanResult(is_safe=False, message="URL is potentially malicious (mock result).")
    return ScanResult(is_safe=True, message="URL is safe (mock result).")


class RecordingCollaborator:
    def __init__(self, output: str = "", error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.payloads: list[str] = []

    def __call__(self, payload: str) -> str:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def make_orchestrator():
    def _make(backend, oracle=mock_oracle, **kwargs) -> AnalysisOrchestrator:
        kwargs.setdefault("executor", ToolExecutor(max_retries=0, max_workers=4))
        return AnalysisOrchestrator(backend=backend, registry=default_capability_registry(oracle), **kwargs)

    return _make


@pytest.fixture
def make_service(make_orchestrator):
    def _make(
        backend,
        *,
        oracle=mock_oracle,
        ocr: RecordingCollaborator | None = None,
        reader: RecordingCollaborator | None = None,
    ) -> ContentAnalysisService:
        normalizer = InputNormalizer(
            extract_text=ocr or RecordingCollaborator("OCR text"),
            read_container=reader or RecordingCollaborator("Email body"),
        )
        return ContentAnalysisService(normalizer=normalizer, orchestrator=make_orchestrator(backend, oracle))

    return _make
