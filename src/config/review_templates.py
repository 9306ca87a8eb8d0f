"""Static review templates offered to reviewers in the dashboard.

# ─── PURPOSE ───────────────────────────────────────────────────────────
#
# Canned approval notes, rejection reasons, edit suggestions and the
# labelled 1–10 quality-rating scale.  Reviewers pick from these to keep
# notes consistent across the team, which in turn keeps the notes that
# flow into the training dataset comparable.
#
# Pure data: no I/O, built once at import time.  ``review_templates()``
# returns a fresh copy so callers can't mutate the shared constants.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import copy
from typing import Any

APPROVAL_NOTES: tuple[str, ...] = (
    "Excellent content quality, ready for publishing",
    "Good content with minor improvements applied",
    "Content approved with SEO optimizations",
    "High-quality content, well-structured and engaging",
)

REJECTION_REASONS: tuple[str, ...] = (
    "Content quality below standards",
    "Insufficient length or detail",
    "Poor SEO optimization",
    "Content not aligned with brand voice",
    "Factual errors or inaccuracies",
    "Duplicate or similar content exists",
)

EDIT_SUGGESTIONS: tuple[str, ...] = (
    "Improve SEO title and description",
    "Add more detailed examples",
    "Enhance introduction and conclusion",
    "Include relevant internal links",
    "Optimize keyword density",
    "Improve readability and structure",
)

QUALITY_RATINGS: tuple[dict[str, Any], ...] = (
    {"score": 9, "label": "Exceptional", "description": "Outstanding quality, ready for immediate publishing"},
    {"score": 8, "label": "Excellent", "description": "High quality with minor improvements"},
    {"score": 7, "label": "Good", "description": "Solid content with some enhancements needed"},
    {"score": 6, "label": "Acceptable", "description": "Meets basic standards"},
    {"score": 5, "label": "Needs Work", "description": "Requires significant improvements"},
)


def review_templates() -> dict[str, list[Any]]:
    """Return all template groups keyed by name."""
    return {
        "approval_notes": list(APPROVAL_NOTES),
        "rejection_reasons": list(REJECTION_REASONS),
        "edit_suggestions": list(EDIT_SUGGESTIONS),
        "quality_ratings": copy.deepcopy(list(QUALITY_RATINGS)),
    }
