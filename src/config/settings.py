from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = True
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Remote document store (JSONBin)
    jsonbin_base_url: str = "https://api.jsonbin.io/v3/b"
    jsonbin_api_key: str = ""
    jsonbin_bin_id: str = ""
    jsonbin_bin_name: str = "Halloween Party RSVPs"
    jsonbin_timeout_seconds: float = 10.0

    # When False the remote store is the only source of truth and failures are raised
    storage_fallback_enabled: bool = True

    # Local fallback store
    local_store_url: str = "sqlite+aiosqlite:///./halloween_rsvps.db"
    local_store_key: str = "halloween-party-rsvps"
    LOG_DB: bool = False

    # Email relay (EmailJS)
    emailjs_api_url: str = "https://api.emailjs.com/api/v1.0/email/send"
    emailjs_service_id: str = ""
    emailjs_public_key: str = ""
    emailjs_private_key: str = ""
    emailjs_notification_template_id: str = ""
    emailjs_confirmation_template_id: str = ""
    emailjs_reminder_template_id: str = ""
    organizer_email: str = ""
    log_emails: bool = True

    # Party details
    party_name: str = "Harry Potter Halloween Party"
    party_date: str = "October 31st, 2025"
    party_time: str = "8:00 PM"
    party_address: str = "1212 Summerfield Dr, Herndon VA 20170"
    street_parking: str = "Yes, there is street parking available"
    contact_email: str = "your-email@example.com"

    reminder_send_delay_seconds: float = 1.0

    # Admin soft lock. Not an access control mechanism.
    admin_password_hash: str = "1347871041"
    admin_max_attempts: int = 3
    admin_lockout_close_seconds: float = 2.0

    # Letter reveal timings
    letter_delivery_seconds: float = 2.0
    letter_opening_seconds: float = 1.5

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    CREATE_LOCAL_STORE_ON_STARTUP: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def remote_store_configured(self) -> bool:
        return bool(self.jsonbin_api_key and self.jsonbin_bin_id)

    @property
    def email_relay_configured(self) -> bool:
        return bool(self.emailjs_public_key and self.emailjs_service_id)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
