from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "FINHEALTH_"}

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Scoring table override (JSON). Empty = built-in table.
    scoring_config_path: str = ""

    # Amortization: |expected - actual| within this % of expected is "on track"
    on_track_tolerance_pct: Decimal = Decimal("2")

    # Snapshot aggregation window
    lookback_months: int = 3

    # Result cache for the HTTP adapter. Empty redis_url = in-process cache.
    redis_url: str = ""
    cache_ttl_seconds: int = 300


settings = Settings()
