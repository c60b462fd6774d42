"""
Custom exceptions for the GitHub research pipeline.

These exceptions carry enough context (operation, identifier, message) to
diagnose a failure from the log alone.
"""


class ResearchError(Exception):
    """Base exception for research pipeline errors."""
    pass


class FetchError(ResearchError):
    """Conversation could not be fetched or its body could not be parsed."""
    pass


class LLMResponseError(ResearchError):
    """LLM returned an invalid or unexpected response."""
    pass


class APIKeyMissingError(ResearchError):
    """Required API key is not configured."""
    pass
