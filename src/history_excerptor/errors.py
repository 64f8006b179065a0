"""Error taxonomy for history excerpt generation."""

from __future__ import annotations


class HistoryExcerptorError(Exception):
    """Base class for all history excerptor failures."""


class HistoryReadError(HistoryExcerptorError):
    """Query execution or result-set read failed. Not retried."""


class UnknownHistoryTableError(HistoryExcerptorError, ValueError):
    """Table or column name is not a known identifier of the registry schema."""


class SignatureSerializationError(HistoryExcerptorError):
    """Payload (or the signing response) cannot be encoded as JSON."""


class HistoryExcerptGenerationError(HistoryExcerptorError):
    """Excerpt still in progress after the whole status-check budget."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            f"Excerpt processing doesn't finished after {attempts} status checks, failing by timeout"
        )


class ExcerptWaitCancelledError(HistoryExcerptorError):
    """The wait between status checks was interrupted."""
