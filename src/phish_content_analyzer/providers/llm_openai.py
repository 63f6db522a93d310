"""OpenAI chat-completion adapter and provider selection."""

from __future__ import annotations

from dataclasses import dataclass
import threading
from typing import Any, Callable

from openai import OpenAI

from phish_content_analyzer.providers.llm_ollama import build_litellm_completion

CompletionFn = Callable[..., Any]


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    model: str
    api_base: str | None = None
    api_key: str | None = None


class _LazyOpenAICompletion:
    """Create the client on first call so a missing key surfaces as a call failure."""

    def __init__(self, api_base: str | None, api_key: str | None) -> None:
        self._api_base = api_base
        self._api_key = api_key
        self._client: OpenAI | None = None
        self._lock = threading.Lock()

    def _get_client(self) -> OpenAI:
        with self._lock:
            if self._client is None:
                self._client = OpenAI(api_key=self._api_key, base_url=self._api_base)
            return self._client

    def __call__(self, **kwargs: Any) -> Any:
        return self._get_client().chat.completions.create(**kwargs)


def build_openai_completion(*, api_base: str | None = None, api_key: str | None = None) -> CompletionFn:
    return _LazyOpenAICompletion(api_base=api_base, api_key=api_key)


def build_completion_fn(cfg: ProviderConfig) -> CompletionFn:
    """Return a chat-completions callable for the configured provider.

    - `openai`: the official OpenAI SDK client.
    - `local`: `litellm.completion` for local/third-party providers (e.g. Ollama).
    """

    provider = (cfg.provider or "openai").strip().lower()
    if provider in {"local", "ollama"}:
        return build_litellm_completion(api_base=cfg.api_base, api_key=cfg.api_key)
    return build_openai_completion(api_base=cfg.api_base, api_key=cfg.api_key)
