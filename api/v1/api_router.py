# app/api/v1/router.py
from fastapi import APIRouter
from api.v1.endpoints import (
    # Landing page & settings
    campaign,

    # Submission & review
    donation,
)

api_router = APIRouter()

# ========== 1️⃣ Campaign ==========
api_router.include_router(campaign.router, tags=["Campaign"])

# ========== 2️⃣ Donations ==========
api_router.include_router(donation.router, tags=["Donations"])
