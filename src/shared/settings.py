"""Runtime settings for the checkout service, loaded from the environment."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration shared by the API and the domains."""

    environment: str = Field(default="development", validation_alias="PROTEAN_ENV")

    # Payment gateway
    payment_gateway: str = Field(default="fake", description="fake | razorpay")
    gateway_key_id: str = Field(default="rzp_test_key")
    gateway_key_secret: str = Field(default="rzp_test_secret")
    gateway_api_url: str = Field(default="https://api.razorpay.com/v1")
    gateway_timeout_seconds: float = Field(default=10.0, gt=0)
    gateway_max_retries: int = Field(default=1, ge=0)

    default_currency: str = Field(default="INR", min_length=3, max_length=3)
    catalog_seed_path: str | None = Field(default=None, description="JSON file of catalog variants for development")

    # Guest session cookie
    session_cookie_name: str = Field(default="session_id")
    session_cookie_max_age: int = Field(default=30 * 24 * 60 * 60)
    cookie_domain: str | None = Field(default=None)
    local_hosts: list[str] = Field(default=["localhost", "127.0.0.1"])

    # Bearer tokens
    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    admin_roles: list[str] = Field(default=["admin"])

    cors_origins: str = Field(default="*", description="Comma-separated list of allowed origins")

    # Logging
    log_level: str | None = Field(default=None, description="Overrides the per-environment default level")
    log_dir: str | None = Field(default=None, description="Directory for the rotating checkout.log")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("payment_gateway")
    @classmethod
    def validate_payment_gateway(cls, v: str) -> str:
        if v.lower() not in ("fake", "razorpay"):
            raise ValueError("payment_gateway must be 'fake' or 'razorpay'")
        return v.lower()

    @field_validator("default_currency")
    @classmethod
    def normalise_currency(cls, v: str) -> str:
        return v.upper()

    def get_cors_origins_list(self) -> list[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Tests that change the environment call ``get_settings.cache_clear()``.
    """
    return Settings()
