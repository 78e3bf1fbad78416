# app/models/donation.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, CheckConstraint, func

from models.base import Base

DONATION_STATUSES = ("PENDING", "APPROVED", "REJECTED")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Donation(Base):
    __tablename__ = "donations"
    __table_args__ = (
        CheckConstraint("tree_quantity > 0", name="ck_donations_quantity_positive"),
        CheckConstraint("amount >= 0", name="ck_donations_amount_nonneg"),
    )

    # DON-XXXXXXX
    id = Column(String(16), primary_key=True)

    donor_name = Column(String(200), nullable=False)
    tree_quantity = Column(Integer, nullable=False)
    # quantity x tree price at submission time; never recomputed
    amount = Column(Integer, nullable=False)
    receipt_url = Column(Text, nullable=False)

    status = Column(
        Enum(*DONATION_STATUSES, name="donation_status"),
        nullable=False,
        default="PENDING",
        index=True,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<Donation {self.id} {self.tree_quantity} trees {self.status}>"
