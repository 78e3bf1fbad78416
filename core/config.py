# app/core/config.py
from pydantic_settings import BaseSettings



class Settings(BaseSettings):
    APP_NAME: str = "TreeFund"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./treefund.db"

    # Object storage (receipts + campaign assets)
    FILE_STORAGE_PATH: str = "./uploads"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MEDIA_URL_PREFIX: str = "/media"
    PROOF_BUCKET: str = "donation-proofs"
    ASSET_BUCKET: str = "campaign-assets"
    MAX_PROOF_SIZE: int = 5 * 1024 * 1024  # 5MB
    ALLOWED_IMAGE_PREFIX: str = "image/"

    # Campaign defaults (used when the settings row does not exist yet)
    DEFAULT_TREE_PRICE: int = 10
    DEFAULT_GOAL_TREES: int = 1000
    DEFAULT_CAMPAIGN_TITLE: str = "Re-Green Our Future"
    DEFAULT_CAMPAIGN_DESCRIPTION: str = "Every tree you sponsor is planted as a native seedling."
    DEFAULT_QR_IMAGE_URL: str = "https://api.qrserver.com/v1/create-qr-code/?size=300x300&data=TNG-PAYMENT-MOCK"

    # Landing payload
    CAMPAIGN_CACHE_TTL: int = 15  # seconds
    RECENT_DONORS_LIMIT: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
