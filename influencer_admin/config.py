from __future__ import annotations

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    BRMH_BASE_URL: AnyHttpUrl = "https://brmh.in"
    BRMH_REQUEST_TIMEOUT_SECONDS: float = 20.0
    BRMH_INFLUENCERS_TABLE: str = "brmh-influencers"
    BRMH_ORDERS_TABLE: str = "brmh-Influencer-orders"
    BRMH_CONTENT_TABLE: str = "brmh-influencer-content"
    BRMH_TEMPLATES_TABLE: str = "brmh-message-templates"
    BRMH_PRODUCTS_TABLE: str = "shopify-inkhub-get-products"
    BRMH_PAGE_SIZE: int = 50
    BRMH_ORDERS_PAGE_SIZE: int = 100

    SHOPIFY_STORE_DOMAIN: str | None = None
    SHOPIFY_ADMIN_TOKEN: str | None = None
    SHOPIFY_API_VERSION: str = "2024-10"
    SHOPIFY_WEBHOOK_SECRET: str | None = None
    SHOPIFY_REQUEST_TIMEOUT_SECONDS: float = 20.0

    DEFAULT_COMPANY_ID: str = "company-1"
    DEFAULT_SHIPPING_COUNTRY: str = "India"

    ADMIN_API_TOKEN: str | None = None
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    PRODUCT_CACHE_DB_URL: str = "sqlite:///./product_search_cache.db"
    PRODUCT_CACHE_TTL_SECONDS: int = 300

    @field_validator("SHOPIFY_STORE_DOMAIN")
    @classmethod
    def normalize_store_domain(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        return normalized or None

    @field_validator("SHOPIFY_API_VERSION")
    @classmethod
    def validate_api_version(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("SHOPIFY_API_VERSION cannot be empty")
        return cleaned

    @property
    def brmh_base_url(self) -> str:
        return str(self.BRMH_BASE_URL).rstrip("/")

    @property
    def shopify_configured(self) -> bool:
        return bool(self.SHOPIFY_STORE_DOMAIN and self.SHOPIFY_ADMIN_TOKEN)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
