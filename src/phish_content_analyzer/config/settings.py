"""Config loader from env + yaml."""

from __future__ import annotations

from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, Field

from phish_content_analyzer.core.errors import ConfigError

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"
ENV_PREFIX = "PHISH_ANALYZER_"


class AppConfig(BaseModel):

    profile: str = Field(default="openai")
    provider: str = Field(default="openai")
    model: str = Field(default="gpt-4.1-mini")
    temperature: float = Field(default=0.0)
    api_base: str | None = Field(default=None)
    api_key: str | None = Field(default=None)
    model_choices: list[str] = Field(default_factory=list)
    max_turns: int = Field(default=6)
    attach_images: bool = Field(default=True)
    ocr_backend: str = Field(default="tesseract")
    ocr_languages: str = Field(default="eng")
    url_reputation_backend: str = Field(default="heuristic")
    virustotal_api_key: str | None = Field(default=None)
    url_scan_timeout_s: float = Field(default=10.0)
    tool_max_retries: int = Field(default=1, ge=0)
    tool_max_workers: int = Field(default=4, ge=1)
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))


def _normalize_provider(raw: Any) -> str:
    provider = str(raw or "").strip().lower()
    if provider in {"ollama", "local", "litellm"}:
        return "local"
    return provider or "openai"


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config at {p}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(ENV_PREFIX + name)
    return value if value not in (None, "") else fallback


def _parse_model_choices(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return list(dict.fromkeys(item.strip() for item in raw.split(",") if item.strip()))
    if isinstance(raw, list):
        return list(dict.fromkeys(str(item).strip() for item in raw if str(item).strip()))
    return []


def _parse_int(raw: Any, fallback: int, *, minimum: int = 1) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value >= minimum else fallback


def _parse_float(raw: Any, fallback: float) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _parse_optional_str(raw: Any) -> str | None:
    value = str(raw if raw is not None else "").strip()
    return value or None


def _parse_bool(raw: Any, fallback: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    value = str(raw if raw is not None else "").strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return fallback


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv(ENV_PREFIX + "DEFAULT_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(
    path: str | Path | None = None,
    *,
    profile_override: str | None = None,
) -> tuple[AppConfig, dict[str, Any]]:
    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)
    profiles = merged.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}

    active_profile = str(profile_override or _pick_env("PROFILE", merged.get("profile", "openai")))
    selected_profile = profile_map.get(active_profile, {})
    selected = selected_profile if isinstance(selected_profile, dict) else {}
    # An explicitly chosen profile keeps model/provider from that profile only.
    use_selector_env = profile_override is None

    def _setting(env_name: str, key: str, fallback: Any) -> Any:
        return _pick_env(env_name, selected.get(key, merged.get(key, fallback)))

    def _selector(env_name: str, key: str, fallback: Any) -> Any:
        value = selected.get(key, merged.get(key, fallback))
        if use_selector_env:
            return _pick_env(env_name, value)
        return value

    selected_provider = _normalize_provider(_selector("PROVIDER", "provider", "openai"))
    selected_model = str(_selector("MODEL", "model", "gpt-4.1-mini"))
    parsed_choices = _parse_model_choices(_selector("MODEL_CHOICES", "model_choices", []))
    if selected_model and selected_model not in parsed_choices:
        parsed_choices.insert(0, selected_model)

    payload = {
        "profile": active_profile,
        "provider": selected_provider,
        "model": selected_model,
        "temperature": _parse_float(_selector("TEMPERATURE", "temperature", 0.0), 0.0),
        "api_base": _parse_optional_str(_setting("API_BASE", "api_base", None)),
        "api_key": _parse_optional_str(_setting("API_KEY", "api_key", None)),
        "model_choices": parsed_choices,
        "max_turns": _parse_int(_selector("MAX_TURNS", "max_turns", 6), 6),
        "attach_images": _parse_bool(_selector("ATTACH_IMAGES", "attach_images", True), True),
        "ocr_backend": _parse_str(_setting("OCR_BACKEND", "ocr_backend", "tesseract"), "tesseract").lower(),
        "ocr_languages": _parse_str(_setting("OCR_LANGUAGES", "ocr_languages", "eng"), "eng"),
        "url_reputation_backend": _parse_str(
            _setting("URL_REPUTATION_BACKEND", "url_reputation_backend", "heuristic"),
            "heuristic",
        ).lower(),
        "virustotal_api_key": _parse_optional_str(
            _setting("VIRUSTOTAL_API_KEY", "virustotal_api_key", os.getenv("VT_API_KEY"))
        ),
        "url_scan_timeout_s": _parse_float(_setting("URL_SCAN_TIMEOUT_S", "url_scan_timeout_s", 10.0), 10.0),
        "tool_max_retries": _parse_int(_setting("TOOL_MAX_RETRIES", "tool_max_retries", 1), 1, minimum=0),
        "tool_max_workers": _parse_int(_setting("TOOL_MAX_WORKERS", "tool_max_workers", 4), 4),
        "log_level": _parse_str(_setting("LOG_LEVEL", "log_level", "INFO"), "INFO").upper(),
        "log_format": _parse_str(_setting("LOG_FORMAT", "log_format", "console"), "console").lower(),
        "default_config_path": str(default_path),
    }

    cfg = AppConfig.model_validate(payload)
    return cfg, merged
