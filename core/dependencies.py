from fastapi import Request

from core.cache import CampaignDataCache
from services.storage_service import FileStorage


def get_storage() -> FileStorage:
    return FileStorage()


def get_campaign_cache(request: Request) -> CampaignDataCache:
    return request.app.state.campaign_cache
