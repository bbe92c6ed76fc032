"""
Failure taxonomy for the social-login flow.

Every subclass is reported to the end user as the same generic notice;
the message carried by the exception is for logs only.
"""


class AuthFlowError(Exception):
    """Base class for anything that aborts a social login."""

    user_message = "Authentication failed. Please try again."


class UnsupportedProviderError(AuthFlowError):
    """Provider name is not in the allow-list. Raised before any side effect."""

    user_message = "Unsupported provider."

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider!r}")


class UpstreamAuthError(AuthFlowError):
    """The provider exchange, profile fetch or state check failed."""


class PersistenceError(AuthFlowError):
    """A storage write failed; the reconciliation transaction was rolled back."""
