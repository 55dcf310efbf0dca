"""Exception hierarchy for fx_cyprus runs."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path


class FxCyprusError(Exception):
    """Base class for every error raised by the package."""


class ConfigurationError(FxCyprusError):
    """Raised when the run configuration is missing or malformed."""


class FatalRunError(FxCyprusError):
    """A condition that aborts the whole run before anything is published."""


class SourceFetchError(FatalRunError):
    """The quote table could not be retrieved from a source."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch the URL {url}: {reason}")


class EmptySourceError(FatalRunError):
    """A source produced no usable quotes after parsing."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"The {source} currency rates are empty!")


class ToleranceExceededError(FatalRunError):
    """Two sources disagree on a currency by more than the configured threshold."""

    def __init__(
        self,
        currency: str,
        base: str,
        selling_diff: Decimal,
        buying_diff: Decimal,
        threshold: Decimal,
    ) -> None:
        self.currency = currency
        self.base = base
        self.selling_diff = selling_diff
        self.buying_diff = buying_diff
        self.threshold = threshold
        super().__init__(
            f"The currency rate difference between sources - {selling_diff} / {buying_diff}, "
            f"is greater than {threshold}! Currency from: {currency}; currency to: {base}"
        )


class RunLockHeldError(FatalRunError):
    """Another rate update already holds the run lock."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Rate update is already running (lock held on {path}). Exiting.")


__all__ = [
    "FxCyprusError",
    "ConfigurationError",
    "FatalRunError",
    "SourceFetchError",
    "EmptySourceError",
    "ToleranceExceededError",
    "RunLockHeldError",
]
