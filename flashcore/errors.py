"""
Exception types raised by flashcore.

Only invalid input is an error. Numeric drift and stale snapshots are
absorbed by clamping and never raise.
"""

from __future__ import annotations


class FlashcoreError(Exception):
    """Base class for all flashcore errors."""


class InvalidInputError(FlashcoreError, ValueError):
    """A value supplied at a call boundary is outside its domain."""


class InvalidRatingError(InvalidInputError):
    """Review rating is not one of again / hard / good / easy."""


class InvalidTimestampError(InvalidInputError):
    """Timestamp is missing or not a datetime."""


class InvalidParametersError(InvalidInputError):
    """FSRS parameter set failed validation."""


class CardNotFoundError(FlashcoreError, LookupError):
    """No card document exists for the requested id."""


class ConfigurationError(FlashcoreError, RuntimeError):
    """Required environment configuration is missing."""


class InvalidDocumentError(FlashcoreError):
    """A stored document could not be parsed."""
