# app/schemas/donation.py
from pydantic import BaseModel
from datetime import datetime
from enum import Enum


class DonationStatus(str, Enum):
    PENDING = "PENDING"  # waiting for an admin to check the receipt
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# statuses an admin may set
REVIEW_STATUSES = (DonationStatus.APPROVED, DonationStatus.REJECTED)


class DonationBucket(str, Enum):
    PENDING = "pending"
    HISTORY = "history"


# ---------- read ----------
class DonationRead(BaseModel):
    id: str
    donor_name: str
    tree_quantity: int
    amount: int
    receipt_url: str
    status: DonationStatus
    created_at: datetime

    class Config:
        from_attributes = True


class DonationCreated(BaseModel):
    message: str
    data: DonationRead


# ---------- review ----------
class DonationStatusUpdate(BaseModel):
    id: str
    status: str


class DonationStatusUpdated(BaseModel):
    message: str
    data: DonationRead
