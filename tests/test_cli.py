import json

import pytest

from conftest import HeuristicBackend, ScriptedBackend, final_turn
from phish_content_analyzer import cli


@pytest.fixture
def patch_service(monkeypatch, make_service):
    def _patch(backend):
        def fake_create_service(**kwargs):
            return make_service(backend), {"provider": "test", "model": kwargs.get("model_override") or "m"}

        monkeypatch.setattr(cli, "create_service", fake_create_service)

    return _patch


def test_main_prints_verdict_json(patch_service, capsys):
    patch_service(HeuristicBackend())
    assert cli.main(["--text", "Lunch at noon?"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["isPhishing"] is False
    assert payload["threatLevel"] == "Safe"
    assert "trace" not in payload


def test_main_trace_includes_events_and_runtime(patch_service, capsys):
    patch_service(ScriptedBackend(final_turn(isPhishing=False)))
    assert cli.main(["--text", "hello", "--trace", "--model", "ollama/qwen2.5:3b"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["runtime"]["model"] == "ollama/qwen2.5:3b"
    assert payload["trace"][0]["stage"] == "normalize"


def test_main_reads_email_file(patch_service, tmp_path, capsys):
    backend = ScriptedBackend(final_turn(isPhishing=False))
    patch_service(backend)
    eml = tmp_path / "notice.eml"
    eml.write_text("From: hr@example.com\nSubject: Notice\n\nHello team.\n")
    assert cli.main(["--email", str(eml)]) == 0
    assert "Email Content:" in backend.calls[0][1]["content"]
    capsys.readouterr()


def test_main_reports_unreadable_payload(patch_service, tmp_path, capsys):
    backend = ScriptedBackend()
    patch_service(backend)
    empty = tmp_path / "empty.eml"
    empty.write_bytes(b"")
    assert cli.main(["--email", str(empty)]) == 2
    payload = json.loads(capsys.readouterr().out)
    assert payload["error"].startswith("Failed to analyze content:")
    assert backend.calls == []


def test_main_reports_missing_file(patch_service, tmp_path, capsys):
    patch_service(ScriptedBackend())
    assert cli.main(["--image", str(tmp_path / "missing.png")]) == 2
    assert "Failed to analyze content" in capsys.readouterr().out


def test_file_to_data_uri_guesses_mime(tmp_path):
    path = tmp_path / "shot.png"
    path.write_bytes(b"\x89PNG")
    assert cli.file_to_data_uri(path, default_mime="image/png").startswith("data:image/png;base64,")
    other = tmp_path / "mail"
    other.write_bytes(b"x")
    assert cli.file_to_data_uri(other, default_mime="message/rfc822").startswith("data:message/rfc822;base64,")


def test_main_reports_invalid_config_as_json(monkeypatch, tmp_path, capsys):
    broken = tmp_path / "broken.yaml"
    broken.write_text("profiles: [unclosed\n")
    monkeypatch.setenv("PHISH_ANALYZER_DEFAULT_CONFIG_PATH", str(broken))
    assert cli.main(["--text", "hello"]) == 1
    captured = capsys.readouterr()
    assert json.loads(captured.out)["error"].startswith("Invalid YAML config")
    assert "error" not in captured.err


def test_chat_loop_answers_each_line_until_quit(patch_service, monkeypatch, capsys):
    patch_service(HeuristicBackend())
    lines = iter(["Lunch at noon?", "quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))
    assert cli.main([]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("chat started")
    assert json.loads(out[1])["threatLevel"] == "Safe"
    assert len(out) == 2


def test_chat_loop_stops_on_end_of_input(patch_service, monkeypatch, capsys):
    patch_service(ScriptedBackend())

    def _eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    assert cli.main([]) == 0
    assert capsys.readouterr().out.startswith("chat started")
