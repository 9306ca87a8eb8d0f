"""Content models — the generated candidate and the reviewed snapshot.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph, no imports from upper layers).
#
# ``ContentCandidate`` is the ingestion contract: what the external
# generation pipeline hands to ``ReviewQueue.enqueue``.  Its metadata
# carries two externally computed signals (``seo_score`` and
# ``uniqueness_score``) that feed the quality scorer.
#
# ``ContentSnapshot`` is the review item's own copy of the content.  It
# adds the derived word count and reading time, and is the value that
# edits replace and that the training-dataset signal ships downstream.
#
# All models use ``frozen=True``; edits produce new snapshots via
# ``model_copy(update={...})``.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat


class ContentType(str, Enum):  # noqa: UP042 (StrEnum needs 3.11)
    """Kind of generated content, as tagged by the generator."""

    BLOG_POST = "blog_post"
    SOCIAL_MEDIA = "social_media"
    EMAIL = "email"
    AD_COPY = "ad_copy"


class SourceReference(BaseModel):
    """A source the generator drew on when writing the candidate."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str = ""


class CandidateMetadata(BaseModel):
    """Generator-supplied metadata for a content candidate.

    ``seo_score`` (0–100) and ``uniqueness_score`` (0–1) come from the
    generation pipeline's own analysers.  Either may be missing, in which
    case the scorer treats it as 0.  NaN and infinite values are rejected.
    """

    model_config = ConfigDict(frozen=True)

    keywords: list[str] = Field(default_factory=list)
    seo_title: str = ""
    seo_description: str = ""
    seo_score: FiniteFloat | None = None
    uniqueness_score: FiniteFloat | None = None


class ContentCandidate(BaseModel):
    """A generated piece of content awaiting review."""

    model_config = ConfigDict(frozen=True)

    content_id: str = Field(min_length=1, description="Generator-assigned content identity.")
    title: str
    body: str = ""
    excerpt: str = ""
    type: ContentType = ContentType.BLOG_POST
    metadata: CandidateMetadata = Field(default_factory=CandidateMetadata)
    ai_provider: str = ""
    source_references: list[SourceReference] = Field(default_factory=list)


class ContentMetadata(CandidateMetadata):
    """Snapshot metadata: the candidate metadata plus derived text metrics."""

    word_count: int = Field(default=0, ge=0)
    reading_time: int = Field(default=0, ge=0, description="Minutes at 200 words per minute.")


class ContentSnapshot(BaseModel):
    """The review item's copy of the content, as currently edited."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str = ""
    excerpt: str = ""
    type: ContentType = ContentType.BLOG_POST
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)
