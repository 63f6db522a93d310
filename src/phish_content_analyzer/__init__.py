"""Phishing content analyzer: text, email and image inputs to a structured verdict."""

__all__ = ["__version__"]

__version__ = "0.1.0"
