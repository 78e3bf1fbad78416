# app/services/campaign_service.py
import logging
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import CampaignDataCache
from core.config import settings
from core.constants import MESSAGES
from core.exceptions import UpdateError
from models.campaign import CampaignSettings, CAMPAIGN_SETTINGS_ID
from schemas.campaign import CampaignData, CampaignRead, CampaignUpdate
from schemas.donation import DonationRead
from services.statistics_service import StatisticsService, compute_stats, recent_approved
from services.storage_service import FileStorage, qr_object_name, validate_image

logger = logging.getLogger(__name__)


class CampaignService:
    def __init__(
            self,
            db: AsyncSession,
            storage: Optional[FileStorage] = None,
            cache: Optional[CampaignDataCache] = None,
    ):
        self.db = db
        self.storage = storage or FileStorage()
        self.cache = cache

    # ---------- read ----------
    async def get_campaign(self) -> CampaignSettings:
        """The campaign row, created from configured defaults on first read."""
        campaign = await self.db.get(CampaignSettings, CAMPAIGN_SETTINGS_ID)
        if campaign:
            return campaign

        campaign = CampaignSettings(
            id=CAMPAIGN_SETTINGS_ID,
            title=settings.DEFAULT_CAMPAIGN_TITLE,
            description=settings.DEFAULT_CAMPAIGN_DESCRIPTION,
            tree_price=settings.DEFAULT_TREE_PRICE,
            goal_trees=settings.DEFAULT_GOAL_TREES,
            trees_approved=0,
            qr_image_url=settings.DEFAULT_QR_IMAGE_URL,
        )
        self.db.add(campaign)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpdateError(f"Failed to create default campaign settings: {e}") from e
        await self.db.refresh(campaign)
        logger.info("Created default campaign settings row")
        return campaign

    async def get_campaign_data(self) -> CampaignData:
        """Landing payload: campaign, derived stats and the donor wall."""
        if self.cache is not None:
            cached = self.cache.get()
            if cached is not None:
                return cached

        campaign = await self.get_campaign()
        donations = await StatisticsService(self.db).load_donations()

        data = CampaignData(
            campaign=CampaignRead.model_validate(campaign),
            stats=compute_stats(donations, campaign.goal_trees),
            recent_donors=[
                DonationRead.model_validate(d)
                for d in recent_approved(donations, settings.RECENT_DONORS_LIMIT)
            ],
        )

        if self.cache is not None:
            self.cache.set(data)
        return data

    # ---------- settings ----------
    async def update_settings(
            self,
            patch: CampaignUpdate,
            qr_file: Optional[UploadFile] = None,
    ) -> CampaignSettings:
        """Merge ``patch`` into the campaign row, uploading a new QR image first if given."""
        campaign = await self.get_campaign()
        changes = patch.model_dump(exclude_none=True)

        if qr_file is not None:
            changes["qr_image_url"] = await self._upload_qr(qr_file)

        for key, value in changes.items():
            setattr(campaign, key, value)

        self.db.add(campaign)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpdateError(f"Failed to update campaign settings: {e}") from e
        await self.db.refresh(campaign)

        if self.cache is not None:
            self.cache.invalidate()

        logger.info(f"Campaign settings updated: {sorted(changes)}")
        return campaign

    @staticmethod
    def settings_message() -> str:
        return MESSAGES["settings.updated"]

    async def _upload_qr(self, qr_file: UploadFile) -> str:
        content = await qr_file.read()
        content_type = validate_image(content, qr_file.content_type, qr_file.filename, label="QR code")

        # time-stamped name: every upload gets a fresh public URL
        name = qr_object_name(qr_file.filename, content_type)
        await self.storage.upload(settings.ASSET_BUCKET, name, content, content_type, upsert=True)
        return self.storage.public_url(settings.ASSET_BUCKET, name)
