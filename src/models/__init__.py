"""Review engine domain models — re-exports all public model classes.

Other parts of the codebase import from ``src.models`` directly instead
of the individual submodules:
    - content.py    — Generated candidate (ingestion contract) and snapshot
    - review.py     — ReviewItem, status machine, score, edit audit, listing
    - decisions.py  — Approve/reject/edit/bulk options and results
    - metrics.py    — Queue statistics, health and capabilities

If you add a new model class, remember to add it to ``__all__`` too.
"""

from __future__ import annotations

from src.models.content import (
    CandidateMetadata,
    ContentCandidate,
    ContentMetadata,
    ContentSnapshot,
    ContentType,
    SourceReference,
)
from src.models.decisions import (
    ApprovalOptions,
    ApprovalResult,
    BulkApprovalOptions,
    BulkItemError,
    BulkResult,
    ContentDetails,
    ContentEdits,
    EditResult,
    TrainingExample,
)
from src.models.metrics import (
    HealthReport,
    HealthStatus,
    PriorityCounts,
    ReviewCapabilities,
    ReviewMetrics,
)
from src.models.review import (
    ACCEPTED_STATUSES,
    ApprovedFeed,
    ApprovedFeedFilters,
    ContentEdit,
    Pagination,
    PriorityBucket,
    QualityScore,
    ReviewFilters,
    ReviewItem,
    ReviewPage,
    ReviewStatus,
)

__all__ = [
    "ACCEPTED_STATUSES",
    "ApprovalOptions",
    "ApprovalResult",
    "ApprovedFeed",
    "ApprovedFeedFilters",
    "BulkApprovalOptions",
    "BulkItemError",
    "BulkResult",
    "CandidateMetadata",
    "ContentCandidate",
    "ContentDetails",
    "ContentEdit",
    "ContentEdits",
    "ContentMetadata",
    "ContentSnapshot",
    "ContentType",
    "EditResult",
    "HealthReport",
    "HealthStatus",
    "Pagination",
    "PriorityBucket",
    "PriorityCounts",
    "QualityScore",
    "ReviewCapabilities",
    "ReviewFilters",
    "ReviewItem",
    "ReviewMetrics",
    "ReviewPage",
    "ReviewStatus",
    "SourceReference",
    "TrainingExample",
]
