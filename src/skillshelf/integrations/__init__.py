"""Integrations module - external services."""

from skillshelf.integrations.llm_provider import ClassificationService, LLMProvider

__all__ = ["ClassificationService", "LLMProvider"]
