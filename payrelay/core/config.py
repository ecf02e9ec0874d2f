"""Central runtime configuration for payrelay."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict

from payrelay.core.errors import ConfigurationError
from payrelay.webhooks.secret import decode_webhook_secret


MAIL_TRANSPORTS = {"smtp", "resend"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    env: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    app_name: str = "payrelay"
    app_version: str = "0.1.0"
    app_public_base_url: str = ""
    trust_forwarded_headers: bool = True
    static_dir: str = "public"
    allow_incomplete_config: bool = False

    yoco_live_secret: str = ""
    yoco_api_base_url: str = "https://payments.yoco.com/api"
    yoco_api_timeout_seconds: int = 20
    checkout_amount_minor: int = 200
    checkout_currency: str = "ZAR"
    currency_symbol: str = "R"

    yoco_webhook_secret: str = ""
    webhook_secret_prefix: str = "whsec"
    webhook_tolerance_seconds: int = 180
    webhook_check_all_signatures: bool = False

    note_cache_max_entries: int = 10000
    note_cache_ttl_seconds: int = 86400

    mail_transport: str = "smtp"
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_timeout_seconds: int = 15
    email_api_key: str = ""
    email_api_base_url: str = "https://api.resend.com"
    email_api_timeout_seconds: int = 20
    notify_from: str = ""
    notify_to: str = ""
    notification_workers: int = 2

    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = 0.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.env.lower() in {"prod", "production"}

    @property
    def webhook_verification_enabled(self) -> bool:
        return bool(self.yoco_webhook_secret.strip())

    @property
    def notification_from_address(self) -> str:
        return (self.notify_from or self.smtp_user).strip()

    @property
    def notification_recipients(self) -> List[str]:
        return [value.strip() for value in self.notify_to.split(",") if value.strip()]


def _required_values(settings: Settings, transport: str) -> Dict[str, str]:
    required = {
        "YOCO_LIVE_SECRET": settings.yoco_live_secret,
        "NOTIFY_TO": settings.notify_to,
    }
    if settings.is_production:
        required["YOCO_WEBHOOK_SECRET"] = settings.yoco_webhook_secret
    if transport == "smtp":
        required.update(
            {
                "SMTP_HOST": settings.smtp_host,
                "SMTP_USER": settings.smtp_user,
                "SMTP_PASS": settings.smtp_pass,
            }
        )
    else:
        required.update(
            {
                "EMAIL_API_KEY": settings.email_api_key,
                "NOTIFY_FROM": settings.notify_from,
            }
        )
    return required


def _validate(settings: Settings) -> Settings:
    transport = settings.mail_transport.strip().lower()
    if transport not in MAIL_TRANSPORTS:
        raise ValueError("MAIL_TRANSPORT must be one of: resend, smtp.")

    # ALLOW_INCOMPLETE_CONFIG only relaxes local development; production is always strict.
    if settings.is_production or not settings.allow_incomplete_config:
        required_values = _required_values(settings, transport)
        missing = [name for name, value in required_values.items() if not str(value).strip()]
        if missing:
            joined = ", ".join(sorted(missing))
            raise ConfigurationError(f"Missing required configuration: {joined}.")

    if settings.webhook_verification_enabled:
        decode_webhook_secret(settings.yoco_webhook_secret, expected_prefix=settings.webhook_secret_prefix)

    if settings.webhook_tolerance_seconds <= 0:
        raise ValueError("WEBHOOK_TOLERANCE_SECONDS must be positive.")
    if settings.checkout_amount_minor <= 0:
        raise ValueError("CHECKOUT_AMOUNT_MINOR must be positive.")
    if not settings.checkout_currency.strip():
        raise ValueError("CHECKOUT_CURRENCY must not be empty.")
    if settings.note_cache_max_entries <= 0:
        raise ValueError("NOTE_CACHE_MAX_ENTRIES must be positive.")
    if settings.note_cache_ttl_seconds <= 0:
        raise ValueError("NOTE_CACHE_TTL_SECONDS must be positive.")
    if settings.notification_workers <= 0:
        raise ValueError("NOTIFICATION_WORKERS must be positive.")
    if settings.smtp_port <= 0 or settings.smtp_port > 65535:
        raise ValueError("SMTP_PORT must be a valid TCP port.")
    if settings.sentry_traces_sample_rate < 0 or settings.sentry_traces_sample_rate > 1:
        raise ValueError("SENTRY_TRACES_SAMPLE_RATE must be between 0 and 1.")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return validated settings as a cached singleton."""

    return _validate(Settings())
