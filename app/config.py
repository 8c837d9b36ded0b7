from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # ── Razorpay ──────────────────────────────────────────────
    razorpay_key_id: str
    razorpay_key_secret: str
    # Outbound calls to Razorpay must never hang a worker thread
    razorpay_timeout_seconds: float = 10.0

    # ── Server ────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8080
    environment: str = "development"
    log_level: str = "INFO"

    # ── HTTP middleware ───────────────────────────────────────
    cors_origins: str = "*"
    # limits-style string: N per window, counted per client IP
    rate_limit: str = "100/15minutes"

    model_config = SettingsConfigDict(
        env_file=".env",
        # Case-insensitive so RAZORPAY_KEY_ID and razorpay_key_id both work
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("razorpay_key_id", "razorpay_key_secret")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("razorpay_timeout_seconds")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Split comma-separated origins into a list, stripping whitespace."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings loader — reads the environment / .env once and reuses it.

    A missing or blank RAZORPAY_KEY_SECRET raises pydantic's ValidationError
    here, which aborts process start before any request is served.
    """
    return Settings()
