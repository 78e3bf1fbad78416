# app/api/v1/endpoints/campaign.py
from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import CampaignDataCache
from core.database import get_db
from core.dependencies import get_campaign_cache, get_storage
from core.exceptions import ValidationError
from schemas.campaign import CampaignData, CampaignRead, CampaignUpdate, CampaignUpdated
from services.campaign_service import CampaignService
from services.storage_service import FileStorage
from utils.forms import form_file, form_scalar, parse_optional_positive_int

router = APIRouter()


@router.get("/campaign-data", response_model=CampaignData)
async def get_campaign_data(
        response: Response,
        db: AsyncSession = Depends(get_db),
        cache: CampaignDataCache = Depends(get_campaign_cache),
):
    """Campaign, progress stats and the five most recent approved donors."""
    response.headers["Cache-Control"] = "s-maxage=10, stale-while-revalidate"
    service = CampaignService(db, cache=cache)
    return await service.get_campaign_data()


@router.post("/update-settings", response_model=CampaignUpdated)
async def update_settings(
        request: Request,
        db: AsyncSession = Depends(get_db),
        storage: FileStorage = Depends(get_storage),
        cache: CampaignDataCache = Depends(get_campaign_cache),
):
    """Multipart: title, description, goal_trees, tree_price, qr_image_url, qr_code (all optional).

    An uploaded qr_code wins over a qr_image_url sent in the same request.
    """
    form = await request.form()
    try:
        patch = CampaignUpdate(
            title=form_scalar(form, "title"),
            description=form_scalar(form, "description"),
            goal_trees=parse_optional_positive_int(form_scalar(form, "goal_trees"), "goal_trees"),
            tree_price=parse_optional_positive_int(form_scalar(form, "tree_price"), "tree_price"),
            qr_image_url=form_scalar(form, "qr_image_url"),
        )
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ValidationError(f"{field}: {error['msg']}") from e

    service = CampaignService(db, storage, cache)
    campaign = await service.update_settings(patch, form_file(form, "qr_code"))
    return {"message": service.settings_message(), "data": CampaignRead.model_validate(campaign)}
