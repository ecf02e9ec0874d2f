import pytest

from payrelay.core.config import get_settings
from payrelay.core.errors import ConfigurationError
from tests.conftest import TEST_SECRET


def _set_minimum_production_env(monkeypatch) -> None:
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("YOCO_LIVE_SECRET", "sk_live_prod")
    monkeypatch.setenv("YOCO_WEBHOOK_SECRET", TEST_SECRET)
    monkeypatch.setenv("MAIL_TRANSPORT", "smtp")
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_USER", "payments@example.com")
    monkeypatch.setenv("SMTP_PASS", "smtp-password")
    monkeypatch.setenv("NOTIFY_TO", "owner@example.com")


def test_missing_credentials_fail_startup_by_default(monkeypatch) -> None:
    monkeypatch.delenv("ALLOW_INCOMPLETE_CONFIG", raising=False)
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    message = str(exc_info.value)
    for name in ("YOCO_LIVE_SECRET", "NOTIFY_TO", "SMTP_HOST", "SMTP_USER", "SMTP_PASS"):
        assert name in message
    assert "YOCO_WEBHOOK_SECRET" not in message


def test_development_without_webhook_secret_starts_when_complete(monkeypatch) -> None:
    monkeypatch.delenv("ALLOW_INCOMPLETE_CONFIG", raising=False)
    monkeypatch.setenv("YOCO_LIVE_SECRET", "sk_test_dev")
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_USER", "payments@example.com")
    monkeypatch.setenv("SMTP_PASS", "smtp-password")
    monkeypatch.setenv("NOTIFY_TO", "owner@example.com")
    get_settings.cache_clear()

    assert get_settings().webhook_verification_enabled is False


def test_incomplete_config_opt_out_is_ignored_in_production(monkeypatch) -> None:
    monkeypatch.setenv("ENV", "production")
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError, match="YOCO_WEBHOOK_SECRET"):
        get_settings()


def test_development_defaults_load() -> None:
    settings = get_settings()

    assert settings.env == "development"
    assert settings.webhook_tolerance_seconds == 180
    assert settings.checkout_amount_minor == 200
    assert settings.checkout_currency == "ZAR"
    assert settings.webhook_verification_enabled is False


def test_loads_environment_values(monkeypatch) -> None:
    monkeypatch.setenv("YOCO_WEBHOOK_SECRET", TEST_SECRET)
    monkeypatch.setenv("WEBHOOK_TOLERANCE_SECONDS", "300")
    monkeypatch.setenv("SMTP_USER", "payments@example.com")
    monkeypatch.setenv("NOTIFY_TO", "a@example.com, b@example.com,,")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.webhook_verification_enabled is True
    assert settings.webhook_tolerance_seconds == 300
    assert settings.notification_recipients == ["a@example.com", "b@example.com"]
    assert settings.notification_from_address == "payments@example.com"


def test_production_accepts_complete_configuration(monkeypatch) -> None:
    _set_minimum_production_env(monkeypatch)
    get_settings.cache_clear()

    assert get_settings().is_production is True


@pytest.mark.parametrize("missing", ["YOCO_LIVE_SECRET", "YOCO_WEBHOOK_SECRET", "SMTP_HOST", "NOTIFY_TO"])
def test_production_requires_secrets_and_mail_settings(monkeypatch, missing: str) -> None:
    _set_minimum_production_env(monkeypatch)
    monkeypatch.setenv(missing, "")
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError, match=missing):
        get_settings()


def test_production_resend_requires_api_key(monkeypatch) -> None:
    _set_minimum_production_env(monkeypatch)
    monkeypatch.setenv("MAIL_TRANSPORT", "resend")
    monkeypatch.setenv("NOTIFY_FROM", "payments@example.com")
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError, match="EMAIL_API_KEY"):
        get_settings()


def test_malformed_webhook_secret_fails_fast(monkeypatch) -> None:
    monkeypatch.setenv("YOCO_WEBHOOK_SECRET", "whsec_***")
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError, match="base64"):
        get_settings()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("MAIL_TRANSPORT", "pigeon"),
        ("WEBHOOK_TOLERANCE_SECONDS", "0"),
        ("CHECKOUT_AMOUNT_MINOR", "0"),
        ("NOTE_CACHE_MAX_ENTRIES", "0"),
        ("NOTIFICATION_WORKERS", "0"),
        ("SENTRY_TRACES_SAMPLE_RATE", "1.5"),
    ],
)
def test_rejects_invalid_values(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    get_settings.cache_clear()

    with pytest.raises(ValueError, match=name):
        get_settings()
