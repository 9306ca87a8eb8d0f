"""Plain-text helpers for markdown content bodies.

Used by ingestion and editing to derive the read-only fields of a review
item: word count, estimated reading time and the short preview shown in
the review dashboard.  All functions are pure.
"""

from __future__ import annotations

import math
import re

_HEADING_MARKER = re.compile(r"^\s{0,3}#{1,6}\s+", re.MULTILINE)
_BOLD = re.compile(r"(\*\*|__)(.+?)\1")
_ITALIC = re.compile(r"(?<![*\w])([*_])(?!\s)(.+?)(?<!\s)\1(?![*\w])")
_INLINE_CODE = re.compile(r"`([^`]*)`")
_LINK = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_LIST_MARKER = re.compile(r"^\s*(?:[-*+]|\d+\.)\s+", re.MULTILINE)
_BLOCKQUOTE = re.compile(r"^\s*>\s?", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")

_ELLIPSIS = "..."


def count_words(text: str) -> int:
    """Count whitespace-separated words.  An empty body has zero words."""
    return len(text.split())


def reading_time_minutes(word_count: int, words_per_minute: int = 200) -> int:
    """Minutes needed to read *word_count* words, rounded up."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / words_per_minute)


def strip_markdown(text: str) -> str:
    """Remove common markdown markup, keeping the readable text.

    Line structure is preserved so callers can still pick out the first
    few lines of a document.
    """
    stripped = _HEADING_MARKER.sub("", text)
    stripped = _LINK.sub(r"\1", stripped)
    stripped = _BOLD.sub(r"\2", stripped)
    stripped = _ITALIC.sub(r"\2", stripped)
    stripped = _INLINE_CODE.sub(r"\1", stripped)
    stripped = _LIST_MARKER.sub("", stripped)
    stripped = _BLOCKQUOTE.sub("", stripped)
    return stripped


def build_preview(body: str, max_chars: int = 200, max_lines: int = 3) -> str:
    """Build a plain-text preview of at most *max_chars* characters.

    The first *max_lines* non-empty lines are joined with single spaces.
    When the text has to be cut, the result ends with ``...`` and still
    fits within *max_chars*.
    """
    lines = [line.strip() for line in strip_markdown(body).splitlines()]
    text = _WHITESPACE.sub(" ", " ".join([line for line in lines if line][:max_lines]))
    if len(text) <= max_chars:
        return text
    cut = text[: max(0, max_chars - len(_ELLIPSIS))].rstrip()
    return cut + _ELLIPSIS
