"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    session_ttl_days: int = 7
    session_cookie_name: str = "storefront_sid"
    session_cookie_secure: bool = False
    stripe_secret_key: str | None = None
    stripe_webhook_secret: str | None = None
    payment_currency: str = "usd"
    seed_catalogue: bool = True

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60

    @classmethod
    def from_env(cls) -> "Settings":
        environment = (os.getenv("PROTEAN_ENV") or "development").lower()
        return cls(
            environment=environment,
            session_ttl_days=int(os.getenv("SESSION_TTL_DAYS", "7")),
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "storefront_sid"),
            session_cookie_secure=_flag("SESSION_COOKIE_SECURE", environment == "production"),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY") or None,
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET") or None,
            payment_currency=os.getenv("PAYMENT_CURRENCY", "usd").lower(),
            seed_catalogue=_flag("SEED_CATALOGUE", True),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the active settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def set_settings(settings: Settings) -> None:
    """Override the active settings (app factory, tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    global _settings
    _settings = None
