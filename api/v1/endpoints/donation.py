# app/api/v1/endpoints/donation.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import CampaignDataCache
from core.database import get_db
from core.dependencies import get_campaign_cache, get_storage
from schemas.campaign import CounterReconciliation
from schemas.donation import (
    DonationBucket, DonationCreated, DonationRead, DonationStatusUpdate, DonationStatusUpdated
)
from services.donation_service import DonationService
from services.storage_service import FileStorage
from utils.forms import form_file, form_scalar

router = APIRouter()


# --------------------------
# 1️⃣ submission
# --------------------------

@router.post("/create-donation", response_model=DonationCreated)
async def create_donation(
        request: Request,
        db: AsyncSession = Depends(get_db),
        storage: FileStorage = Depends(get_storage),
        cache: CampaignDataCache = Depends(get_campaign_cache),
):
    """Multipart: quantity, donorName (optional), proof (receipt image)."""
    form = await request.form()
    quantity = form_scalar(form, "quantity")
    donor_name = form_scalar(form, "donorName")
    proof = form_file(form, "proof")

    service = DonationService(db, storage, cache)
    donation = await service.create_donation(quantity, proof, donor_name)

    return {
        "message": service.confirmation_message(donation.tree_quantity),
        "data": DonationRead.model_validate(donation),
    }


# --------------------------
# 2️⃣ admin review
# --------------------------

@router.get("/all-donations", response_model=List[DonationRead])
async def list_donations(
        bucket: Optional[DonationBucket] = Query(None),
        search: Optional[str] = Query(None, max_length=100),
        db: AsyncSession = Depends(get_db),
):
    """Every donation, newest first. No authentication is enforced here."""
    service = DonationService(db)
    donations = await service.list_donations(bucket, search)
    return [DonationRead.model_validate(d) for d in donations]


@router.post("/update-donation", response_model=DonationStatusUpdated)
async def update_donation(
        status_data: DonationStatusUpdate,
        db: AsyncSession = Depends(get_db),
        storage: FileStorage = Depends(get_storage),
        cache: CampaignDataCache = Depends(get_campaign_cache),
):
    service = DonationService(db, storage, cache)
    donation = await service.set_status(status_data.id, status_data.status)
    return {"message": service.status_message(), "data": DonationRead.model_validate(donation)}


@router.post("/reconcile-counter", response_model=CounterReconciliation)
async def reconcile_counter(
        db: AsyncSession = Depends(get_db),
        storage: FileStorage = Depends(get_storage),
        cache: CampaignDataCache = Depends(get_campaign_cache),
):
    """Rebuild the approved-tree counter from the donation list."""
    service = DonationService(db, storage, cache)
    return await service.reconcile_counter()
