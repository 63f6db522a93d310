"""LiteLLM/Ollama chat-completion adapter."""

from __future__ import annotations

from typing import Any, Callable

import litellm


def build_litellm_completion(
    *,
    api_base: str | None = None,
    api_key: str | None = None,
) -> Callable[..., Any]:
    def _complete(**kwargs: Any) -> Any:
        return litellm.completion(api_base=api_base, api_key=api_key, **kwargs)

    return _complete
