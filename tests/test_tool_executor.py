import threading
import time

from phish_content_analyzer.orchestrator.tool_executor import ToolExecutor, ToolJob


def test_execute_retries_then_succeeds():
    attempts = {"count": 0}

    def flaky(url: str) -> dict[str, object]:
        attempts["count"] += 1
        if attempts["count"] < 2:
            raise ConnectionError("reset")
        return {"url": url}

    result = ToolExecutor(max_retries=1).execute(tool_name="scanURL", tool_fn=flaky, url="https://a.example")
    assert result.ok is True
    assert result.attempts == 2
    assert result.output == {"url": "https://a.example"}


def test_execute_reports_error_name_after_exhausting_retries():
    def broken(url: str) -> dict[str, object]:
        raise TimeoutError(url)

    result = ToolExecutor(max_retries=2).execute(tool_name="scanURL", tool_fn=broken, url="x")
    assert result.ok is False
    assert result.error == "TimeoutError"
    assert result.attempts == 3


def test_execute_batch_runs_concurrently_and_keeps_order():
    barrier = threading.Barrier(3, timeout=5)

    def wait_then_echo(url: str) -> str:
        barrier.wait()
        time.sleep(0.01)
        return url

    jobs = [
        ToolJob(call_id=f"c{idx}", tool_name="scanURL", tool_fn=wait_then_echo, kwargs={"url": f"u{idx}"})
        for idx in range(3)
    ]
    results = ToolExecutor(max_workers=3).execute_batch(jobs)
    assert [item.output for item in results] == ["u0", "u1", "u2"]
    assert [item.call_id for item in results] == ["c0", "c1", "c2"]
    assert all(item.ok for item in results)


def test_execute_batch_empty():
    assert ToolExecutor().execute_batch([]) == []
