import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from api.v1.api_router import api_router
from core.cache import CampaignDataCache
from core.config import settings
from core.database import init_models
from core.exceptions import register_exception_handlers

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info(f"{settings.APP_NAME} started")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Tree sponsorship donations: landing stats, receipt submission and admin review",
        version="1.0.0",
        lifespan=lifespan,
    )

    # shared by every request; mutations invalidate it
    app.state.campaign_cache = CampaignDataCache(ttl=settings.CAMPAIGN_CACHE_TTL)

    register_exception_handlers(app)

    storage_root = Path(settings.FILE_STORAGE_PATH)
    storage_root.mkdir(parents=True, exist_ok=True)
    app.mount(settings.MEDIA_URL_PREFIX, StaticFiles(directory=storage_root), name="media")

    app.include_router(api_router, prefix="/api/v1")

    # ✅ health check
    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "message": f"{settings.APP_NAME} is running ✅",
            "version": "1.0.0"
        }

    return app


app = create_app()
