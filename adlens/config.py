"""ADLENS — Central Configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Source ──
    source_url: str = ""
    request_timeout: float = 30.0

    # ── Analysis ──
    reference_timezone: str = ""  # IANA name; empty = host local zone
    default_window_days: int = 7
    top_creatives_limit: int = 6

    # ── App ──
    log_level: str = "INFO"
    autostart: bool = True
    scheduler_enabled: bool = False
    refresh_hour: int = 6  # Daily refresh at 6 AM

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
