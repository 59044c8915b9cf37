"""Prompt library lint tool: front-matter and collection manifest validation."""

__version__ = "0.1.0"
