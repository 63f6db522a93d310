"""Analysis orchestrator: drives one request through the reasoning backend.

States: Idle -> Reasoning -> (ToolWait <-> Reasoning)* -> Completed | Degraded.
The orchestrator never raises; any reasoning failure ends in a fail-closed
verdict.
"""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Any

from phish_content_analyzer.core.errors import ReasoningFailureError
from phish_content_analyzer.core.logging import get_logger
from phish_content_analyzer.domain.contracts import AnalysisVerdict, EnrichedContent, RawVerdict
from phish_content_analyzer.orchestrator.backend import Message, ReasoningBackend, ToolCall
from phish_content_analyzer.orchestrator.capabilities import CapabilityRegistry
from phish_content_analyzer.orchestrator.prompts import ANALYSIS_PROMPT, render_user_message
from phish_content_analyzer.orchestrator.tool_executor import ToolExecutionResult, ToolExecutor, ToolJob
from phish_content_analyzer.orchestrator.tracing import TraceEvent, final_event, make_event
from phish_content_analyzer.orchestrator.validator import ConsistencyValidator
from phish_content_analyzer.orchestrator.verdicts import empty_output_verdict, failed_analysis_verdict, finalize

logger = get_logger(__name__)


class AnalysisState(str, Enum):
    IDLE = "idle"
    REASONING = "reasoning"
    TOOL_WAIT = "tool_wait"
    COMPLETED = "completed"
    DEGRADED = "degraded"


_TRANSITIONS: dict[AnalysisState, frozenset[AnalysisState]] = {
    AnalysisState.IDLE: frozenset({AnalysisState.REASONING, AnalysisState.DEGRADED}),
    AnalysisState.REASONING: frozenset(
        {AnalysisState.TOOL_WAIT, AnalysisState.COMPLETED, AnalysisState.DEGRADED}
    ),
    AnalysisState.TOOL_WAIT: frozenset({AnalysisState.REASONING, AnalysisState.DEGRADED}),
    AnalysisState.COMPLETED: frozenset(),
    AnalysisState.DEGRADED: frozenset(),
}


@dataclass
class AnalysisRun:
    """Mutable turn state of one orchestration run."""

    state: AnalysisState = AnalysisState.IDLE
    messages: list[Message] = field(default_factory=list)
    outstanding: set[str] = field(default_factory=set)
    rounds: int = 0
    tool_calls: int = 0

    def transition(self, target: AnalysisState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal analysis transition {self.state.value} -> {target.value}")
        logger.debug("analysis_transition", source=self.state.value, target=target.value, rounds=self.rounds)
        self.state = target


@dataclass
class AnalysisOrchestrator:
    backend: ReasoningBackend
    registry: CapabilityRegistry
    executor: ToolExecutor = field(default_factory=ToolExecutor)
    validator: ConsistencyValidator = field(default_factory=ConsistencyValidator)
    max_turns: int = 6
    instructions: str = ANALYSIS_PROMPT
    attach_images: bool = False

    def analyze_stream(self, content: EnrichedContent) -> Generator[TraceEvent, None, None]:
        run = AnalysisRun(
            messages=[
                {"role": "system", "content": self.instructions},
                {
                    "role": "user",
                    "content": render_user_message(
                        content.text, content.images if self.attach_images else ()
                    ),
                },
            ]
        )
        try:
            run.transition(AnalysisState.REASONING)
            yield make_event("reasoning", "running", "Reasoning backend is analyzing content.")
            raw = yield from self._reason(run)
            if raw is None:
                run.transition(AnalysisState.DEGRADED)
                verdict = empty_output_verdict()
                logger.warning("analysis_degraded", reason="empty_output", rounds=run.rounds)
                yield make_event("runtime", "fallback", "Backend returned no output; failing closed.")
            else:
                verdict = finalize(raw)
                run.transition(AnalysisState.COMPLETED)
                yield make_event(
                    "reasoning",
                    "done",
                    "Final verdict ready.",
                    data={"rounds": run.rounds, "tool_calls": run.tool_calls},
                )
        except Exception as exc:
            run.state = AnalysisState.DEGRADED
            verdict = failed_analysis_verdict()
            logger.error(
                "analysis_degraded",
                reason="backend_failure",
                error=type(exc).__name__,
                detail=str(exc),
                rounds=run.rounds,
            )
            yield make_event("runtime", "error", f"Reasoning failed: {type(exc).__name__}. Failing closed.")

        issues = self.validator.validate(verdict)
        if issues:
            logger.warning("verdict_inconsistent", codes=[item.code for item in issues])
            yield make_event(
                "validate",
                "warning",
                "Verdict fields are not mutually consistent.",
                data={"issues": [{"code": item.code, "message": item.message} for item in issues]},
            )
        logger.info(
            "analysis_finished",
            state=run.state.value,
            is_phishing=verdict.is_phishing,
            threat_level=verdict.threat_level.value,
            rounds=run.rounds,
            tool_calls=run.tool_calls,
        )
        yield final_event(verdict)

    def analyze(self, content: EnrichedContent) -> AnalysisVerdict:
        final: AnalysisVerdict | None = None
        for event in self.analyze_stream(content):
            if event.get("type") == "final":
                final = event["result"]
        return final if final is not None else failed_analysis_verdict()

    def _reason(self, run: AnalysisRun) -> Generator[TraceEvent, None, RawVerdict | None]:
        tools = self.registry.export()
        while True:
            if run.rounds >= self.max_turns:
                raise ReasoningFailureError(f"Reasoning exceeded {self.max_turns} turns.")
            run.rounds += 1
            turn = self.backend.complete(list(run.messages), tools)
            if not turn.requests_tools:
                return turn.output

            run.messages.append(turn.assistant_message or {"role": "assistant", "content": ""})
            run.transition(AnalysisState.TOOL_WAIT)
            run.outstanding = {call.id for call in turn.tool_calls}
            yield make_event(
                "tool_wait",
                "running",
                "Waiting on capability calls.",
                data={"outstanding": sorted(run.outstanding), "round": run.rounds},
            )
            yield from self._resolve_tool_calls(run, turn.tool_calls)
            if run.outstanding:
                raise ReasoningFailureError(f"Unresolved tool calls: {sorted(run.outstanding)}")
            run.transition(AnalysisState.REASONING)

    def _resolve_tool_calls(
        self, run: AnalysisRun, calls: tuple[ToolCall, ...]
    ) -> Generator[TraceEvent, None, None]:
        jobs: list[ToolJob] = []
        for call in calls:
            capability = self.registry.get(call.name)
            jobs.append(
                ToolJob(
                    call_id=call.id,
                    tool_name=call.name,
                    tool_fn=capability.invoke,
                    kwargs=capability.parse_arguments(call.arguments),
                )
            )

        results = self.executor.execute_batch(jobs)
        for call, job, result in zip(calls, jobs, results):
            output = self._tool_output(result)
            run.messages.append(
                {
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": json.dumps(output, ensure_ascii=True),
                }
            )
            run.outstanding.discard(call.id)
            run.tool_calls += 1
            logger.info(
                "tool_call_resolved",
                tool=call.name,
                call_id=call.id,
                ok=result.ok,
                attempts=result.attempts,
                elapsed_ms=result.elapsed_ms,
            )
            yield make_event(
                f"tool.{call.name}",
                "done" if result.ok else "error",
                "Capability call completed." if result.ok else "Capability call failed; reported as unverified.",
                data={"call_id": call.id, "arguments": job.kwargs, "result": output},
            )

    def _tool_output(self, result: ToolExecutionResult) -> dict[str, Any]:
        if result.ok:
            return dict(result.output)
        return self.registry.get(result.tool_name).on_failure(result.error or "UnknownError")
