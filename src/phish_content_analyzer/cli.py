"""Runner wrappers for the command line."""

from __future__ import annotations

import argparse
import json
import mimetypes
from pathlib import Path

from phish_content_analyzer.config.settings import load_config
from phish_content_analyzer.core.errors import AnalyzerError, NormalizationError
from phish_content_analyzer.core.logging import configure_logging
from phish_content_analyzer.domain.contracts import AnalysisRequest
from phish_content_analyzer.domain.data_uri import build_data_uri
from phish_content_analyzer.orchestrator.build import create_service


def file_to_data_uri(path: str | Path, *, default_mime: str) -> str:
    p = Path(path)
    mime_type = mimetypes.guess_type(p.name)[0] or default_mime
    return build_data_uri(p.read_bytes(), mime_type)


def run_once(
    text: str | None = None,
    *,
    image_path: str | None = None,
    email_path: str | None = None,
    model: str | None = None,
    profile: str | None = None,
    trace: bool = False,
) -> str:
    service, runtime = create_service(profile_override=profile, model_override=model)
    request = AnalysisRequest(
        text=text,
        image_payload=file_to_data_uri(image_path, default_mime="image/png") if image_path else None,
        email_payload=file_to_data_uri(email_path, default_mime="message/rfc822") if email_path else None,
    )
    events: list[dict[str, object]] = []
    result: dict[str, object] = {}
    for event in service.analyze_stream(request):
        if event.get("type") == "final":
            result = event["result"].to_payload()
        else:
            events.append(event)
    if trace:
        result["trace"] = events
        result["runtime"] = runtime
    return json.dumps(result, ensure_ascii=True)


def run_chat(*, model: str | None = None, profile: str | None = None) -> None:
    service, runtime = create_service(profile_override=profile, model_override=model)
    print(f"chat started provider={runtime['provider']} model={runtime['model']}")
    while True:
        try:
            raw = input("> ").strip()
        except EOFError:
            print()
            break
        if raw.lower() in {"exit", "quit"}:
            break
        result = service.analyze_content(text=raw).to_payload()
        print(json.dumps(result, ensure_ascii=True))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phish-content-analyzer")
    parser.add_argument("--text", help="Message text to analyze.")
    parser.add_argument("--image", help="Path to a screenshot/photo to OCR and analyze.")
    parser.add_argument("--email", help="Path to an .eml file to analyze.")
    parser.add_argument("--model", help="Override model for this run, e.g. ollama/qwen2.5:3b.")
    parser.add_argument("--profile", help="Config profile to use, e.g. openai or ollama.")
    parser.add_argument("--trace", action="store_true", help="Include trace events and runtime info.")
    return parser


def _print_error(message: str) -> None:
    # Error JSON shares stdout with results; logs stay on stderr.
    print(json.dumps({"error": message}, ensure_ascii=True))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg, _ = load_config(profile_override=args.profile)
        configure_logging(cfg.log_level, cfg.log_format)
        if args.text or args.image or args.email:
            print(
                run_once(
                    args.text,
                    image_path=args.image,
                    email_path=args.email,
                    model=args.model,
                    profile=args.profile,
                    trace=args.trace,
                )
            )
            return 0
        run_chat(model=args.model, profile=args.profile)
    except (NormalizationError, OSError) as exc:
        _print_error(f"Failed to analyze content: {exc}")
        return 2
    except AnalyzerError as exc:
        _print_error(str(exc))
        return 1
    return 0
