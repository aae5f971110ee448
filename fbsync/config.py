"""FBSync — Central Configuration via Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Meta API ──
    meta_access_token: str = ""
    meta_ad_account_id: str = ""  # e.g. act_1234567890
    meta_api_version: str = "v20.0"
    meta_base_url: str = "https://graph.facebook.com"
    meta_page_size: int = 5000
    meta_max_pages: int = 50
    meta_time_increment: str = "1"  # "1" = daily rows, "" = one row per range
    meta_timeout_seconds: float = 30.0

    # ── BigQuery ──
    google_project_id: str = ""
    bigquery_dataset_id: str = "fb_ads_data"
    bigquery_ignore_unknown_values: bool = True

    # ── Destination tables ──
    campaign_table: str = "campaign_insights"
    adset_table: str = "fb_adset_insights"
    ad_table: str = "fb_ad_insights"

    # ── Sync ──
    sync_date_preset: Optional[str] = None  # e.g. "maximum" for all history
    sync_since: Optional[str] = None
    sync_until: Optional[str] = None
    sync_lookback_days: int = 2
    sync_fail_fast: bool = False
    include_reporting_date: bool = True

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    sync_hour: int = 2  # Daily run at 2 AM UTC

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
