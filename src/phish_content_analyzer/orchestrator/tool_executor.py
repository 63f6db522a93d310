"""Tool execution wrapper with retry, timing and concurrent batches."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import time
from typing import Any, Callable

from phish_content_analyzer.core.logging import get_logger

logger = get_logger(__name__)

ToolFn = Callable[..., Any]


@dataclass(frozen=True)
class ToolExecutionResult:
    ok: bool
    tool_name: str
    call_id: str = ""
    output: Any = None
    error: str | None = None
    attempts: int = 1
    elapsed_ms: int = 0


@dataclass(frozen=True)
class ToolJob:
    call_id: str
    tool_name: str
    tool_fn: ToolFn
    kwargs: dict[str, Any]


@dataclass
class ToolExecutor:
    """Wraps tool execution into a normalized result contract."""

    max_retries: int = 0
    max_workers: int = 4

    def execute(self, *, tool_name: str, tool_fn: ToolFn, call_id: str = "", **kwargs: Any) -> ToolExecutionResult:
        attempts = 0
        max_attempts = max(1, int(self.max_retries) + 1)
        start = time.perf_counter()
        last_error: Exception | None = None

        for _ in range(max_attempts):
            attempts += 1
            try:
                output = tool_fn(**kwargs)
                return ToolExecutionResult(
                    ok=True,
                    tool_name=str(tool_name),
                    call_id=call_id,
                    output=output,
                    attempts=attempts,
                    elapsed_ms=int((time.perf_counter() - start) * 1000),
                )
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "tool_attempt_failed",
                    tool=tool_name,
                    call_id=call_id,
                    attempt=attempts,
                    error=type(exc).__name__,
                )

        error_name = type(last_error).__name__ if last_error is not None else "UnknownError"
        return ToolExecutionResult(
            ok=False,
            tool_name=str(tool_name),
            call_id=call_id,
            error=error_name,
            attempts=attempts,
            elapsed_ms=int((time.perf_counter() - start) * 1000),
        )

    def execute_batch(self, jobs: list[ToolJob]) -> list[ToolExecutionResult]:
        """Run independent jobs concurrently; results keep the order of `jobs`."""

        if not jobs:
            return []
        if len(jobs) == 1 or self.max_workers <= 1:
            return [self._run_job(job) for job in jobs]
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(jobs))) as pool:
            return list(pool.map(self._run_job, jobs))

    def _run_job(self, job: ToolJob) -> ToolExecutionResult:
        return self.execute(tool_name=job.tool_name, tool_fn=job.tool_fn, call_id=job.call_id, **job.kwargs)
