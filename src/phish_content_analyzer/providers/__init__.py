"""Model provider adapters."""

from phish_content_analyzer.providers.llm_ollama import build_litellm_completion
from phish_content_analyzer.providers.llm_openai import ProviderConfig, build_completion_fn, build_openai_completion

__all__ = ["ProviderConfig", "build_completion_fn", "build_litellm_completion", "build_openai_completion"]
