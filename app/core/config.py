from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "E-Commerce API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    TESTING: bool = False

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./ecommerce.db"
    TEST_DATABASE_URL: Optional[str] = None

    # Cache. No REDIS_URL means the in-process cache (no expiry).
    REDIS_URL: Optional[str] = None
    CACHE_TTL: int = 60 * 60  # 1 hour

    # Catalogue
    PRODUCT_PER_PAGE: int = 8
    LATEST_PRODUCTS_LIMIT: int = 5
    MAX_PRODUCT_PHOTOS: int = 5

    # Logging
    LOG_DIR: str = "logs"

    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    STRIPE_SECRET_KEY: str = ""
    PAYMENT_CURRENCY: str = "inr"

    class Config:
        env_file = ".env"

settings = Settings()
