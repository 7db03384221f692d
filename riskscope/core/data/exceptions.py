"""
Custom exceptions for Riskscope.

Error taxonomy:
- ResolutionError: input could not be matched to any security
- ProviderError (and subclasses): one adapter failed; triggers fallback
- ComputationError: degenerate financial data prevents a meaningful score
- BatchTotalFailure: no item in a batch succeeded

Every message is human-readable and safe to show to a user.
"""

from typing import Optional


class RiskscopeError(Exception):
    """Base exception for all Riskscope errors."""

    pass


class ConfigurationError(RiskscopeError):
    """Raised when configuration values are missing or out of range."""

    pass


class ResolutionError(RiskscopeError):
    """
    Raised when free-text input cannot be matched to any security.

    Surfaced per item in a batch; never aborts the batch.
    """

    def __init__(self, input_text: str, reason: Optional[str] = None):
        self.input_text = input_text
        self.reason = reason or "no provider returned a match"
        super().__init__(
            f'Could not resolve company "{input_text}": {self.reason}. '
            "Use the stock ticker symbol (e.g., AAPL for Apple) or check the spelling."
        )


class ProviderError(RiskscopeError):
    """
    Base exception for a failed provider call.

    Recoverable: callers fall back to the next provider and only surface
    the error when every provider is exhausted.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class ProviderNotConfiguredError(ProviderError):
    """Raised when a provider has no API key configured."""

    def __init__(self, provider: str):
        super().__init__(provider, "API key not configured")


class ProviderQuotaError(ProviderError):
    """
    Raised when a provider's daily quota is exhausted.

    Raised before any network call is attempted.
    """

    def __init__(self, provider: str, limit: int):
        self.limit = limit
        super().__init__(provider, f"daily quota of {limit} requests exhausted")


class ProviderTimeoutError(ProviderError):
    """Raised when a provider request exceeds its timeout."""

    def __init__(self, provider: str, timeout: float):
        self.timeout = timeout
        super().__init__(provider, f"request timed out after {timeout:g}s")


class ProviderResponseError(ProviderError):
    """Raised on a non-2xx HTTP response."""

    def __init__(self, provider: str, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(provider, message or f"HTTP {status_code} response")


class ProviderDataError(ProviderError):
    """Raised when a response is empty, malformed, or lacks the requested data."""

    pass


class AllProvidersFailedError(ProviderError):
    """
    Raised when every provider failed for one lookup.

    Carries each provider's reason so the caller can report them.
    """

    def __init__(self, operation: str, ticker: str, reasons: Optional[list[str]] = None):
        self.operation = operation
        self.ticker = ticker
        self.reasons = reasons or []
        detail = "; ".join(self.reasons) if self.reasons else "no provider available"
        super().__init__(
            "all",
            f"{operation} unavailable for {ticker} ({detail})",
        )


class ComputationError(RiskscopeError):
    """
    Raised when degenerate financial data prevents a meaningful score.

    By default the ratio engine represents this condition in its result
    (risk zone "Unknown"); strict callers get the exception instead.
    """

    pass


class BatchTotalFailure(RiskscopeError):
    """
    Raised when zero items in a batch succeeded.

    Attributes:
        failures: List of {"input": ..., "reason": ...} dicts, one per item.
    """

    def __init__(self, failures: list[dict[str, str]]):
        self.failures = failures
        super().__init__(
            f"Unable to analyze any of the {len(failures)} provided companies"
        )
