"""Summary statistics over a snapshot of review items."""

from __future__ import annotations

from collections.abc import Sequence

from src.models.metrics import PriorityCounts, ReviewMetrics
from src.models.review import PriorityBucket, ReviewItem, ReviewStatus


class MetricsAggregator:
    """Derives :class:`ReviewMetrics` from whatever items it is given.

    Holds no state; the queue passes in a snapshot (the whole queue for
    statistics, or the filtered set for a listing summary).
    """

    def compute(self, items: Sequence[ReviewItem]) -> ReviewMetrics:
        total = len(items)
        if total == 0:
            return ReviewMetrics()

        by_status = {status: 0 for status in ReviewStatus}
        by_bucket = {bucket: 0 for bucket in PriorityBucket}
        for item in items:
            by_status[item.status] += 1
            by_bucket[item.priority_bucket] += 1

        approved = by_status[ReviewStatus.APPROVED]
        auto_approved = by_status[ReviewStatus.AUTO_APPROVED]

        review_minutes = [
            (item.reviewed_at - item.created_at).total_seconds() / 60
            for item in items
            if item.reviewed_at is not None
        ]

        return ReviewMetrics(
            total_items=total,
            total_pending=by_status[ReviewStatus.PENDING],
            total_approved=approved,
            total_rejected=by_status[ReviewStatus.REJECTED],
            auto_approved=auto_approved,
            average_quality_score=round(sum(i.quality_score.overall for i in items) / total),
            approval_rate=round((approved + auto_approved) / total * 100),
            priority_counts=PriorityCounts(
                high=by_bucket[PriorityBucket.HIGH],
                medium=by_bucket[PriorityBucket.MEDIUM],
                low=by_bucket[PriorityBucket.LOW],
            ),
            average_read_time=round(sum(i.estimated_read_time for i in items) / total),
            average_review_time=(
                round(sum(review_minutes) / len(review_minutes), 2) if review_minutes else 0.0
            ),
        )
