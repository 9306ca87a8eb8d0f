"""Deterministic composite quality scoring for content candidates.

Four buckets contribute up to 25 points each:

    length      body word count — ≥1000 → 25, ≥500 → 20, ≥300 → 15, else 10
    structure   headings + paragraphs + intro/conclusion → 25,
                headings + paragraphs → 20, paragraphs only → 15, else 10
    seo         external seo_score (0–100) / 4
    uniqueness  external uniqueness_score (0–1) × 25

``overall`` is the rounded sum, capped at 100.  Scoring is pure: the only
input besides the content is the timestamp stamped on the result, which
callers can pin via ``now`` for reproducible output.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from src.models.content import CandidateMetadata, ContentCandidate, ContentSnapshot
from src.models.review import QualityScore
from src.utils.text import count_words

_BUCKET_MAX = 25

# (minimum words, points), checked top-down.
_LENGTH_TIERS: tuple[tuple[int, int], ...] = ((1000, 25), (500, 20), (300, 15))
_LENGTH_FLOOR = 10

_HEADING = re.compile(r"^#{1,6}\s", re.MULTILINE)
_INTRO_CONCLUSION = ("introduction", "conclusion")


def length_points(word_count: int) -> int:
    for minimum, points in _LENGTH_TIERS:
        if word_count >= minimum:
            return points
    return _LENGTH_FLOOR


def structure_points(body: str) -> int:
    has_headings = bool(_HEADING.search(body))
    # More than two blank-line-separated blocks.
    has_paragraphs = len(body.split("\n\n")) > 2
    lowered = body.lower()
    has_intro_conclusion = any(word in lowered for word in _INTRO_CONCLUSION)

    if has_headings and has_paragraphs and has_intro_conclusion:
        return 25
    if has_headings and has_paragraphs:
        return 20
    if has_paragraphs:
        return 15
    return 10


def seo_points(seo_score: float | None) -> float:
    clamped = min(max(seo_score or 0.0, 0.0), 100.0)
    return min(clamped / 4, _BUCKET_MAX)


def uniqueness_points(uniqueness_score: float | None) -> float:
    clamped = min(max(uniqueness_score or 0.0, 0.0), 1.0)
    return clamped * _BUCKET_MAX


class QualityScorer:
    """Computes a :class:`QualityScore` from a candidate or an edited snapshot."""

    def score(
        self,
        content: ContentCandidate | ContentSnapshot,
        now: datetime | None = None,
    ) -> QualityScore:
        return self.score_parts(content.body, content.metadata, now=now)

    def score_parts(
        self,
        body: str,
        metadata: CandidateMetadata,
        now: datetime | None = None,
    ) -> QualityScore:
        length = length_points(count_words(body))
        structure = structure_points(body)
        seo = seo_points(metadata.seo_score)
        uniqueness = uniqueness_points(metadata.uniqueness_score)

        overall = min(round(length + structure + seo + uniqueness), 100)

        return QualityScore(
            length=length,
            structure=structure,
            seo=seo,
            uniqueness=uniqueness,
            overall=overall,
            calculated_at=now or datetime.now(tz=timezone.utc),  # noqa: UP017
        )
