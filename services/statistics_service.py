# app/services/statistics_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime, timezone
from typing import Iterable, List, Sequence

from models.donation import Donation
from schemas.campaign import CampaignStats
from schemas.donation import DonationStatus


def _status_of(donation) -> str:
    status = donation.status
    return status.value if isinstance(status, DonationStatus) else status


def _created_key(donation) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    created = donation.created_at
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def progress_percent(current: int, goal: int) -> int:
    """Share of the goal reached, capped at 100. A non-positive goal reads as 0%."""
    if not goal or goal <= 0:
        return 0
    # half-up rounding in integer arithmetic
    return min((current * 200 + goal) // (2 * goal), 100)


def compute_stats(donations: Iterable, goal_trees: int) -> CampaignStats:
    """Summary numbers for the landing page.

    Only APPROVED donations count towards trees and money; PENDING ones are
    reported separately as ``pending_trees``; REJECTED ones are ignored.
    """
    total_trees = 0
    total_amount = 0
    pending_trees = 0

    for donation in donations:
        status = _status_of(donation)
        if status == DonationStatus.APPROVED.value:
            total_trees += int(donation.tree_quantity)
            total_amount += int(donation.amount)
        elif status == DonationStatus.PENDING.value:
            pending_trees += int(donation.tree_quantity)

    return CampaignStats(
        total_trees=total_trees,
        total_amount=total_amount,
        pending_trees=pending_trees,
        goal_trees=goal_trees,
        progress_percent=progress_percent(total_trees, goal_trees),
    )


def recent_approved(donations: Sequence, limit: int = 5) -> List:
    """Newest APPROVED donations first; equal timestamps keep their input order."""
    if limit <= 0:
        return []
    approved = [d for d in donations if _status_of(d) == DonationStatus.APPROVED.value]
    # sorted() is stable with reverse=True as well
    approved = sorted(approved, key=_created_key, reverse=True)
    return approved[:limit]


def approved_tree_total(donations: Iterable) -> int:
    return sum(
        int(d.tree_quantity) for d in donations
        if _status_of(d) == DonationStatus.APPROVED.value
    )


class StatisticsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_donations(self) -> List[Donation]:
        """Every donation, oldest first."""
        result = await self.db.execute(
            select(Donation).order_by(Donation.created_at.asc())
        )
        return list(result.scalars().all())
