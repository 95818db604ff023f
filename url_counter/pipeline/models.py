"""
Data models for the UrlCounter pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class UrlCount:
    """Outcome of one successfully processed URL."""

    url: str
    count: int


@dataclass(slots=True, frozen=True)
class CountSummary:
    """Final snapshot of the Aggregator."""

    total: int
    succeeded: int
    dropped: int
