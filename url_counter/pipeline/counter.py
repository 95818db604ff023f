"""Substring occurrence counting over raw response bodies."""
from __future__ import annotations

from typing import Union


def count_occurrences(body: Union[bytes, str], pattern: Union[bytes, str]) -> int:
    """
    Count non-overlapping, case-sensitive occurrences of *pattern* in *body*.

    The scan goes left to right and resumes after the end of every match, so
    ``"GoGoGo"`` holds three ``"Go"`` and ``"aaaa"`` holds two ``"aa"``.
    Text arguments are encoded as UTF-8 before matching.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    if isinstance(pattern, str):
        pattern = pattern.encode("utf-8")
    if not pattern:
        raise ValueError("pattern must not be empty")
    return body.count(pattern)


__all__ = ["count_occurrences"]
