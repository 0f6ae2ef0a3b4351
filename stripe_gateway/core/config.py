import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SECRET_KEY_ENV = "STRIPE_SECRET_KEY"
PUBLISHABLE_KEY_ENV = "STRIPE_PUBLIC_KEY"

PRODUCTION = "production"
TEST = "test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Stripe Gateway")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True, description="Render log lines as JSON instead of the console format")

    stripe_api_version: Optional[str] = Field(default=None, description="Pin the Stripe API version sent with each request")
    stripe_max_network_retries: int = Field(default=0, ge=0, description="Retries performed by the Stripe SDK itself")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION


class GatewayPreferences(BaseModel):
    """Persisted preferences of a Stripe payment method."""

    secret_key: Optional[str] = None
    publishable_key: Optional[str] = None


def _environment_or_preference(
    variable: str,
    preference: Optional[str],
    environ: Optional[Mapping[str, str]],
) -> Optional[str]:
    if environ is None:
        environ = os.environ
    value = environ.get(variable)
    if value is not None:
        return value
    return preference


def resolve_secret_key(
    preferences: GatewayPreferences,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Return STRIPE_SECRET_KEY when it is set, else the stored secret key."""
    return _environment_or_preference(SECRET_KEY_ENV, preferences.secret_key, environ)


def resolve_publishable_key(
    preferences: GatewayPreferences,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Return STRIPE_PUBLIC_KEY when it is set, else the stored publishable key."""
    return _environment_or_preference(PUBLISHABLE_KEY_ENV, preferences.publishable_key, environ)


def resolve_environment(production: bool) -> str:
    return PRODUCTION if production else TEST


def resolve_test_mode(production: bool) -> bool:
    return not production


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Stripe credentials are not read from here; they are resolved per call
    with resolve_secret_key / resolve_publishable_key.

    Returns:
        Settings: The cached settings instance
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the cached settings instance.

    Useful for testing or when configuration needs to be reloaded.
    """
    get_settings.cache_clear()
