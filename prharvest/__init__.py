"""Harvest automated code-review suggestions into LLM-ready prompts."""

__version__ = "0.1.0"
