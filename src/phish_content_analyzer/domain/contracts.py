"""Structured contracts for analyzer I/O."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ThreatLevel(str, Enum):
    SAFE = "Safe"
    SUSPICIOUS = "Suspicious"
    DANGEROUS = "Dangerous"

    @classmethod
    def coerce(cls, raw: Any) -> Any:
        """Match a backend-provided level case-insensitively, else return it unchanged."""

        if isinstance(raw, str):
            clean = raw.strip().lower()
            for item in cls:
                if item.value.lower() == clean:
                    return item
        return raw


class AnalysisRequest(_CamelModel):
    """One caller request; any channel may be absent."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    text: str | None = None
    image_payload: str | None = Field(default=None, alias="imageDataUri")
    email_payload: str | None = Field(default=None, alias="emailDataUri")

    def is_empty(self) -> bool:
        return not (self.text or "").strip() and not self.image_payload and not self.email_payload


class EnrichedContent(BaseModel):
    """Labelled text blob assembled from every channel of one request."""

    model_config = ConfigDict(frozen=True)

    text: str
    channels: tuple[str, ...] = ()
    # Image data URIs, kept for backends that can look at the picture itself.
    images: tuple[str, ...] = ()


class AnalysisVerdict(_CamelModel):
    """Application-level result returned to callers; every field always set."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    is_phishing: bool
    indicators: list[str]
    safety_score: float = Field(ge=0.0, le=1.0)
    explanation: str
    threat_level: ThreatLevel
    risk_factors: list[str]

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class RawVerdict(_CamelModel):
    """Verdict as reported by the reasoning backend; any field may be missing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    is_phishing: bool | None = None
    indicators: list[str] | None = None
    safety_score: float | None = None
    explanation: str | None = None
    threat_level: ThreatLevel | None = None
    risk_factors: list[str] | None = None

    @field_validator("threat_level", mode="before")
    @classmethod
    def _coerce_threat_level(cls, value: Any) -> Any:
        return ThreatLevel.coerce(value)

    @field_validator("indicators", "risk_factors", mode="before")
    @classmethod
    def _coerce_string_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value


class ScanUrlArgs(BaseModel):
    """Arguments of the URL reputation capability."""

    url: str = Field(description="The URL to scan.")


class ScanResult(_CamelModel):
    """Outcome of one URL reputation lookup."""

    is_safe: bool = Field(description="Whether the URL is considered safe.")
    message: str = Field(description="A message providing more details about the scan result.")
