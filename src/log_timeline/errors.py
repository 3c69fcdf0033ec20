"""Exceptions raised by the log timeline engines."""

from __future__ import annotations


class CorpusLoadError(ValueError):
    """The supplied payload could not be decoded; nothing was loaded."""
