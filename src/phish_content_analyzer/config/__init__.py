"""Configuration loading."""

from phish_content_analyzer.config.settings import AppConfig, load_config

__all__ = ["AppConfig", "load_config"]
