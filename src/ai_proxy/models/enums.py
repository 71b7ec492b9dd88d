"""
Enumerations for the AI request proxy data models.

All enums are closed sets - no values outside these sets are permitted.
"""

from enum import Enum


class ProviderIdentity(str, Enum):
    """
    Closed set of text-generation backends.

    There is no dynamic registration: adding a backend means adding a member
    here and an adapter registered in the dispatcher.
    """

    GEMINI = "gemini"
    GROQ = "groq"
    CEREBRAS = "cerebras"

    @classmethod
    def parse(cls, value: "str | ProviderIdentity") -> "ProviderIdentity":
        """Resolve a raw identifier; raises ValueError when it is not a member."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class UsageStatus(str, Enum):
    """Daily quota status of a provider."""

    NORMAL = "normal"
    WARNING = "warning"
    EXCEEDED = "exceeded"
