# app/schemas/campaign.py
from pydantic import BaseModel, Field
from typing import Optional, List

from schemas.donation import DonationRead


class CampaignRead(BaseModel):
    id: int
    title: str
    description: str
    tree_price: int
    goal_trees: int
    trees_approved: int
    qr_image_url: Optional[str] = None

    class Config:
        from_attributes = True


# ---------- settings patch ----------
class CampaignUpdate(BaseModel):
    """Fields left as None keep their stored value."""
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    tree_price: Optional[int] = Field(None, gt=0)
    goal_trees: Optional[int] = Field(None, gt=0)
    qr_image_url: Optional[str] = Field(None, max_length=2048, pattern=r"^https?://")


class CampaignUpdated(BaseModel):
    message: str
    data: CampaignRead


# ---------- stats ----------
class CampaignStats(BaseModel):
    total_trees: int = Field(0, alias="totalTrees")
    total_amount: int = Field(0, alias="totalAmount")
    pending_trees: int = Field(0, alias="pendingTrees")
    goal_trees: int = Field(0, alias="goalTrees")
    progress_percent: int = Field(0, alias="progressPercent")

    class Config:
        populate_by_name = True


class CampaignData(BaseModel):
    campaign: CampaignRead
    stats: CampaignStats
    recent_donors: List[DonationRead] = Field(default_factory=list, alias="recentDonors")

    class Config:
        populate_by_name = True


class CounterReconciliation(BaseModel):
    cached: int
    derived: int
    drift: int
