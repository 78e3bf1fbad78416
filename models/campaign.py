# app/models/campaign.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from models.base import Base

CAMPAIGN_SETTINGS_ID = 1


class CampaignSettings(Base):
    """The single active campaign. Always stored under id 1."""
    __tablename__ = "campaign_settings"

    id = Column(Integer, primary_key=True, default=CAMPAIGN_SETTINGS_ID)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    tree_price = Column(Integer, nullable=False)
    goal_trees = Column(Integer, nullable=False)

    # Denormalized approved-tree total, maintained on review. Stats are derived
    # from the donations table; this is a cache checked by reconcile_counter().
    trees_approved = Column(Integer, nullable=False, default=0)

    qr_image_url = Column(String(1000), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
