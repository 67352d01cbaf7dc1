"""
Meal Mate - Exception types.

Every error the core raises derives from MealMateError so request handlers
can turn it into a friendly message.
"""


class MealMateError(Exception):
    """Base exception for Meal Mate."""


class GatewayConfigError(MealMateError):
    """Raised when the generation gateway cannot be configured."""


class GatewayUnavailableError(MealMateError):
    """Raised when the language model service fails for any reason."""

    def __init__(self, verb: str, reason: str):
        self.verb = verb
        self.reason = reason
        super().__init__(f"Generation service unavailable during {verb}: {reason}")


class FetchError(MealMateError):
    """Raised when a remote page or image cannot be fetched."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class StoreError(MealMateError):
    """Raised when the persistence layer rejects an operation."""
