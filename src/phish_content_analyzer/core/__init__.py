"""Core cross-cutting helpers."""
