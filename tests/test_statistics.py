"""Tests for the donation aggregation helpers."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from schemas.donation import DonationStatus
from services.statistics_service import (
    approved_tree_total, compute_stats, progress_percent, recent_approved,
)

BASE = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def donation(qty, status, minutes=0, price=10, name="Donor"):
    return SimpleNamespace(
        donor_name=name,
        tree_quantity=qty,
        amount=qty * price,
        status=status,
        created_at=BASE + timedelta(minutes=minutes),
    )


class TestComputeStats:
    def test_only_approved_counts_towards_totals(self):
        donations = [
            donation(5, "APPROVED"),
            donation(3, "PENDING"),
            donation(7, "REJECTED"),
            donation(2, "APPROVED", price=20),
        ]
        stats = compute_stats(donations, goal_trees=1000)

        assert stats.total_trees == 7
        assert stats.total_amount == 50 + 40
        assert stats.pending_trees == 3
        assert stats.goal_trees == 1000

    def test_pending_and_rejected_do_not_move_totals(self):
        approved = [donation(4, "APPROVED"), donation(6, "APPROVED")]
        noise = [donation(100, "PENDING"), donation(50, "REJECTED")]

        assert compute_stats(approved, 10).total_trees == compute_stats(approved + noise, 10).total_trees
        assert compute_stats(approved, 10).total_amount == compute_stats(noise + approved, 10).total_amount

    def test_order_does_not_change_result(self):
        donations = [donation(i, "APPROVED") for i in range(1, 20)]
        forward = compute_stats(donations, 500)
        backward = compute_stats(list(reversed(donations)), 500)
        assert forward == backward
        assert forward.total_amount == sum(range(1, 20)) * 10

    def test_empty_list(self):
        stats = compute_stats([], goal_trees=1000)
        assert (stats.total_trees, stats.total_amount, stats.pending_trees) == (0, 0, 0)
        assert stats.progress_percent == 0

    def test_accepts_enum_statuses(self):
        stats = compute_stats([donation(3, DonationStatus.APPROVED)], goal_trees=10)
        assert stats.total_trees == 3
        assert stats.progress_percent == 30

    def test_serializes_with_camel_case_keys(self):
        stats = compute_stats([donation(1, "APPROVED")], goal_trees=4)
        assert stats.model_dump(by_alias=True) == {
            "totalTrees": 1,
            "totalAmount": 10,
            "pendingTrees": 0,
            "goalTrees": 4,
            "progressPercent": 25,
        }


class TestProgressPercent:
    @pytest.mark.parametrize(
        "current, goal, expected",
        [
            (0, 1000, 0),
            (1, 3, 33),
            (2, 3, 67),
            (1, 200, 1),  # 0.5 rounds up
            (1000, 1000, 100),
            (5000, 1000, 100),
            (10, 0, 0),
            (10, -5, 0),
        ],
    )
    def test_values(self, current, goal, expected):
        assert progress_percent(current, goal) == expected


class TestRecentApproved:
    def test_newest_first_and_only_approved(self):
        donations = [
            donation(1, "APPROVED", minutes=1, name="a"),
            donation(1, "PENDING", minutes=10, name="p"),
            donation(1, "APPROVED", minutes=5, name="b"),
            donation(1, "REJECTED", minutes=9, name="r"),
            donation(1, "APPROVED", minutes=3, name="c"),
        ]
        recent = recent_approved(donations, limit=5)

        assert [d.donor_name for d in recent] == ["b", "c", "a"]
        assert all(d.status == "APPROVED" for d in recent)

    def test_caps_at_limit(self):
        donations = [donation(1, "APPROVED", minutes=i) for i in range(12)]
        recent = recent_approved(donations, limit=5)

        assert len(recent) == 5
        stamps = [d.created_at for d in recent]
        assert stamps == sorted(stamps, reverse=True)

    def test_fewer_than_limit_returns_what_exists(self):
        donations = [donation(1, "APPROVED", minutes=i) for i in range(3)]
        assert len(recent_approved(donations, limit=5)) == 3

    def test_ties_keep_input_order(self):
        donations = [donation(1, "APPROVED", name=n) for n in ("first", "second", "third")]
        assert [d.donor_name for d in recent_approved(donations, 5)] == ["first", "second", "third"]

    def test_naive_and_aware_timestamps_mix(self):
        naive = donation(1, "APPROVED", minutes=10, name="naive")
        naive.created_at = naive.created_at.replace(tzinfo=None)
        aware = donation(1, "APPROVED", minutes=5, name="aware")

        assert [d.donor_name for d in recent_approved([aware, naive], 5)] == ["naive", "aware"]

    def test_non_positive_limit(self):
        assert recent_approved([donation(1, "APPROVED")], limit=0) == []


def test_approved_tree_total():
    donations = [donation(4, "APPROVED"), donation(9, "PENDING"), donation(2, "APPROVED")]
    assert approved_tree_total(donations) == 6
