# app/services/donation_service.py
import logging
import secrets
from typing import List, Optional, Union

from fastapi import UploadFile
from sqlalchemy import select, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import CampaignDataCache
from core.config import settings
from core.constants import (
    ANONYMOUS_DONOR, DONATION_ID_ALPHABET, DONATION_ID_LENGTH, DONATION_ID_PREFIX,
    MAX_COLUMN_INTEGER, MAX_DONOR_NAME_LENGTH, MESSAGES,
)
from core.exceptions import InsertError, NotFoundError, StorageError, UpdateError, ValidationError
from models.donation import Donation
from schemas.campaign import CounterReconciliation
from schemas.donation import DonationBucket, DonationStatus, REVIEW_STATUSES
from services.campaign_service import CampaignService
from services.statistics_service import StatisticsService, approved_tree_total
from services.storage_service import FileStorage, proof_object_name, validate_image
from utils.forms import parse_positive_int

logger = logging.getLogger(__name__)


class DonationService:
    def __init__(
            self,
            db: AsyncSession,
            storage: Optional[FileStorage] = None,
            cache: Optional[CampaignDataCache] = None,
    ):
        self.db = db
        self.storage = storage or FileStorage()
        self.cache = cache

    # ---------- submission ----------
    async def create_donation(
            self,
            quantity: Union[str, int, None],
            proof: Optional[UploadFile],
            donor_name: Optional[str] = None,
    ) -> Donation:
        """Record a claimed donation in PENDING state.

        The receipt is uploaded before the row is inserted, so a stored donation
        always points at an existing proof. If the insert fails the uploaded
        proof is removed again.
        """
        tree_quantity = parse_positive_int(quantity, "quantity")
        if proof is None or not proof.filename:
            raise ValidationError("A receipt upload is required for verification.")

        content = await proof.read()
        content_type = validate_image(content, proof.content_type, proof.filename)

        # price is read now and frozen into the amount
        campaign = await CampaignService(self.db, self.storage).get_campaign()
        amount = tree_quantity * campaign.tree_price
        if amount > MAX_COLUMN_INTEGER:
            raise ValidationError("quantity is too large for the current tree price.")

        object_name = proof_object_name(proof.filename)
        await self.storage.upload(settings.PROOF_BUCKET, object_name, content, content_type)
        receipt_url = self.storage.public_url(settings.PROOF_BUCKET, object_name)

        try:
            donation = Donation(
                id=await self._generate_donation_id(),
                donor_name=self._clean_donor_name(donor_name),
                tree_quantity=tree_quantity,
                amount=amount,
                receipt_url=receipt_url,
                status=DonationStatus.PENDING.value,
            )
            self.db.add(donation)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            await self._discard_proof(object_name)
            raise InsertError(f"Failed to create donation record: {e}") from e

        await self.db.refresh(donation)

        if self.cache is not None:
            self.cache.invalidate()

        logger.info(
            f"Donation {donation.id} created: {tree_quantity} trees, amount {amount}, proof {object_name}"
        )
        return donation

    @staticmethod
    def confirmation_message(tree_quantity: int) -> str:
        trees = "tree" if tree_quantity == 1 else "trees"
        return MESSAGES["donation.created"].format(quantity=tree_quantity, trees=trees)

    # ---------- review ----------
    async def list_donations(
            self,
            bucket: Optional[DonationBucket] = None,
            search: Optional[str] = None,
    ) -> List[Donation]:
        """All donations, newest first, optionally narrowed to a review bucket or a search term."""
        query = select(Donation)

        if bucket == DonationBucket.PENDING:
            query = query.where(Donation.status == DonationStatus.PENDING.value)
        elif bucket == DonationBucket.HISTORY:
            query = query.where(Donation.status != DonationStatus.PENDING.value)

        term = (search or "").strip()
        if term:
            query = query.where(
                or_(
                    func.lower(Donation.donor_name).contains(term.lower(), autoescape=True),
                    Donation.id.contains(term, autoescape=True),
                )
            )

        result = await self.db.execute(query.order_by(Donation.created_at.desc()))
        return list(result.scalars().all())

    async def set_status(self, donation_id: Optional[str], new_status: Optional[str]) -> Donation:
        """Approve or reject a donation.

        Setting the status it already has changes nothing. The campaign's
        ``trees_approved`` counter follows transitions into and out of APPROVED.
        """
        donation_id = (donation_id or "").strip()
        new_status = (new_status or "").strip()
        if not donation_id or not new_status:
            raise ValidationError("Missing id or status.")
        if new_status not in {s.value for s in REVIEW_STATUSES}:
            raise ValidationError("Invalid status.")

        donation = await self.db.get(Donation, donation_id)
        if not donation:
            raise NotFoundError(f"Donation {donation_id} not found.")

        old_status = donation.status
        if old_status == new_status:
            return donation

        campaign = await CampaignService(self.db, self.storage).get_campaign()
        if new_status == DonationStatus.APPROVED.value:
            campaign.trees_approved = (campaign.trees_approved or 0) + donation.tree_quantity
        elif old_status == DonationStatus.APPROVED.value:
            campaign.trees_approved = max(0, (campaign.trees_approved or 0) - donation.tree_quantity)

        donation.status = new_status
        self.db.add_all([donation, campaign])
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpdateError(f"Failed to update donation {donation_id}: {e}") from e
        await self.db.refresh(donation)

        if self.cache is not None:
            self.cache.invalidate()

        logger.info(f"Donation {donation_id} status changed from {old_status} to {new_status}")
        return donation

    @staticmethod
    def status_message() -> str:
        return MESSAGES["donation.status_updated"]

    async def reconcile_counter(self) -> CounterReconciliation:
        """Recompute ``trees_approved`` from the donation list and report any drift."""
        donations = await StatisticsService(self.db).load_donations()
        derived = approved_tree_total(donations)

        campaign = await CampaignService(self.db, self.storage).get_campaign()
        cached = campaign.trees_approved or 0
        drift = cached - derived

        if drift:
            logger.warning(f"trees_approved drifted by {drift} (cached {cached}, derived {derived}); resetting")
            campaign.trees_approved = derived
            self.db.add(campaign)
            try:
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise UpdateError(f"Failed to reset trees_approved: {e}") from e
            if self.cache is not None:
                self.cache.invalidate()

        return CounterReconciliation(cached=cached, derived=derived, drift=drift)

    # ---------- helpers ----------
    async def _generate_donation_id(self) -> str:
        while True:
            suffix = "".join(secrets.choice(DONATION_ID_ALPHABET) for _ in range(DONATION_ID_LENGTH))
            candidate = f"{DONATION_ID_PREFIX}{suffix}"
            if not await self.db.get(Donation, candidate):
                return candidate

    @staticmethod
    def _clean_donor_name(donor_name: Optional[str]) -> str:
        name = " ".join((donor_name or "").split())
        return name[:MAX_DONOR_NAME_LENGTH] or ANONYMOUS_DONOR

    async def _discard_proof(self, object_name: str) -> None:
        try:
            await self.storage.remove(settings.PROOF_BUCKET, object_name)
        except StorageError as e:
            logger.error(f"Could not remove orphaned proof {object_name}: {e.message}")
