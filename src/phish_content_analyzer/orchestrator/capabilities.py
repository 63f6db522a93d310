"""Capability registry exposed to the reasoning backend as function tools."""

from __future__ import annotations

from dataclasses import dataclass
import json
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from pydantic import BaseModel, ValidationError

from phish_content_analyzer.core.errors import ReasoningFailureError, UnknownCapabilityError
from phish_content_analyzer.domain.contracts import ScanResult, ScanUrlArgs

SCAN_URL = "scanURL"
SCAN_URL_DESCRIPTION = (
    "Scans a URL to determine if it is safe. Use this to determine if any URLs found in the text "
    "are malicious. Call it for every URL in the content before deciding on a verdict."
)


@dataclass(frozen=True)
class Capability:
    name: str
    description: str
    args_model: type[BaseModel]
    handler: Callable[..., BaseModel]
    on_failure: Callable[[str], dict[str, Any]]

    def tool_spec(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.args_model.model_json_schema(),
            },
        }

    def parse_arguments(self, raw: str | Mapping[str, Any] | None) -> dict[str, Any]:
        """Validate backend-supplied arguments into handler kwargs."""

        if isinstance(raw, str):
            try:
                raw = json.loads(raw or "{}")
            except json.JSONDecodeError as exc:
                raise ReasoningFailureError(f"Tool {self.name} received non-JSON arguments.") from exc
        try:
            args = self.args_model.model_validate(raw or {})
        except ValidationError as exc:
            raise ReasoningFailureError(f"Tool {self.name} received invalid arguments.") from exc
        return args.model_dump()

    def invoke(self, **kwargs: Any) -> dict[str, Any]:
        return self.handler(**kwargs).model_dump(mode="json", by_alias=True)


def _scan_url_failure(error: str) -> dict[str, Any]:
    return ScanResult(
        is_safe=False,
        message=f"URL scan failed ({error}); treat this URL as unverified.",
    ).model_dump(mode="json", by_alias=True)


class CapabilityRegistry:
    """Read-only set of capabilities, fixed at construction."""

    def __init__(self, capabilities: Iterable[Capability]) -> None:
        table: dict[str, Capability] = {}
        for item in capabilities:
            if item.name in table:
                raise ValueError(f"Duplicate capability name: {item.name}")
            table[item.name] = item
        self._capabilities: Mapping[str, Capability] = MappingProxyType(table)

    def names(self) -> list[str]:
        return list(self._capabilities)

    def get(self, name: str) -> Capability:
        try:
            return self._capabilities[name]
        except KeyError:
            raise UnknownCapabilityError(f"Unknown capability requested: {name!r}") from None

    def export(self) -> list[dict[str, Any]]:
        return [item.tool_spec() for item in self._capabilities.values()]


def scan_url_capability(oracle: Callable[[str], ScanResult]) -> Capability:
    return Capability(
        name=SCAN_URL,
        description=SCAN_URL_DESCRIPTION,
        args_model=ScanUrlArgs,
        handler=oracle,
        on_failure=_scan_url_failure,
    )


def default_capability_registry(oracle: Callable[[str], ScanResult]) -> CapabilityRegistry:
    return CapabilityRegistry([scan_url_capability(oracle)])
