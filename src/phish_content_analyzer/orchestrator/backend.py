"""Reasoning backend contract and the chat-completions implementation."""

from __future__ import annotations

from dataclasses import dataclass
import json
import re
from typing import Any, Callable, Protocol

from pydantic import ValidationError

from phish_content_analyzer.core.errors import ReasoningFailureError
from phish_content_analyzer.domain.contracts import RawVerdict

Message = dict[str, Any]

_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class ToolCall:
    id: str
    name: str
    arguments: str = "{}"


@dataclass(frozen=True)
class BackendTurn:
    """One backend response: either tool calls to run, or a final output (maybe empty)."""

    tool_calls: tuple[ToolCall, ...] = ()
    output: RawVerdict | None = None
    assistant_message: Message | None = None

    @property
    def requests_tools(self) -> bool:
        return bool(self.tool_calls)


class ReasoningBackend(Protocol):
    def complete(self, messages: list[Message], tools: list[dict[str, Any]]) -> BackendTurn:
        ...


def extract_json(text: str) -> dict[str, Any] | None:
    fenced = _JSON_FENCE_RE.search(text)
    if fenced:
        try:
            return json.loads(fenced.group(1))
        except json.JSONDecodeError:
            return None
    match = _JSON_RE.search(text)
    if not match:
        return None
    candidate = match.group(0)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return _extract_json_loose(candidate)


def _extract_json_loose(text: str) -> dict[str, Any] | None:
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    for idx in range(start, len(text)):
        char = text[idx]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                snippet = text[start : idx + 1]
                try:
                    return json.loads(snippet)
                except json.JSONDecodeError:
                    return None
    return None


def parse_raw_verdict(content: str) -> RawVerdict:
    payload = extract_json(content)
    if not isinstance(payload, dict):
        raise ReasoningFailureError("Backend output is not a JSON object.")
    try:
        raw = RawVerdict.model_validate(payload)
    except ValidationError as exc:
        raise ReasoningFailureError("Backend output does not match the verdict schema.") from exc
    # Per-field defaults only fill gaps in a verdict; an object with no verdict field is not one.
    if not raw.model_dump(exclude_none=True):
        raise ReasoningFailureError("Backend output contains no verdict fields.")
    return raw


@dataclass
class ChatCompletionsBackend:
    """Backend over any OpenAI-compatible `chat.completions` callable."""

    completion: Callable[..., Any]
    model: str
    temperature: float = 0.0

    def complete(self, messages: list[Message], tools: list[dict[str, Any]]) -> BackendTurn:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if tools:
            kwargs["tools"] = tools
        response = self.completion(**kwargs)
        choices = getattr(response, "choices", None) or []
        if not choices:
            return BackendTurn()
        message = choices[0].message

        raw_calls = getattr(message, "tool_calls", None) or []
        if raw_calls:
            calls = tuple(
                ToolCall(
                    id=str(getattr(item, "id", "") or f"call_{idx}"),
                    name=str(item.function.name),
                    arguments=str(item.function.arguments or "{}"),
                )
                for idx, item in enumerate(raw_calls)
            )
            assistant: Message = {
                "role": "assistant",
                "content": message.content or "",
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": call.arguments},
                    }
                    for call in calls
                ],
            }
            return BackendTurn(tool_calls=calls, assistant_message=assistant)

        content = str(getattr(message, "content", "") or "").strip()
        if not content:
            return BackendTurn()
        return BackendTurn(
            output=parse_raw_verdict(content),
            assistant_message={"role": "assistant", "content": content},
        )
