"""Exception classes for the paired-swings engine."""

from __future__ import annotations


class PairedSwingsError(Exception):
    """Base exception for all paired-swings errors."""


class MalformedRecordError(PairedSwingsError, ValueError):
    """Raised when an input record does not have the expected shape."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        record_index: int | None = None,
    ):
        self.source = source
        self.record_index = record_index
        prefix = ""
        if source is not None:
            prefix = f"{source} record"
            if record_index is not None:
                prefix += f" #{record_index}"
            prefix += ": "
        super().__init__(prefix + message)


class ConfigError(PairedSwingsError, ValueError):
    """Raised when engine configuration fails validation."""
