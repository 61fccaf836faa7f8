from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, Field, AliasChoices
from typing import Optional


class Settings(BaseSettings):
    # Pydantic v2 settings config
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # App Configuration
    app_name: str = "Mentorverse Backend"
    debug: bool = True
    frontend_url: str = "http://localhost:9002"

    # JWT Configuration (session identification only, login is a mock)
    jwt_secret_key: str = "mentorverse-dev-secret"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 43200  # 30 days

    # Session cache
    redis_url: Optional[str] = None
    session_cache_prefix: str = "mentorverse"
    session_cache_ttl_seconds: int = 7 * 24 * 3600

    # Demo data and simulated network latency
    seed_demo_data: bool = True
    simulated_latency_ms: int = 0

    # Booking rules, both off to match the mock ledger
    reject_past_slots: bool = False
    reject_overlapping_bookings: bool = False

    # Suggestions
    suggestion_limit: int = 3
    suggestion_failure_policy: str = "empty"  # "empty" or "raise"

    # Hosted language model
    # Accept the Gemini/Google key names as well
    llm_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LLM_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    llm_model: str = "gemini-2.0-flash"
    llm_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    llm_timeout_seconds: Optional[float] = None

    @field_validator(
        'debug', 'seed_demo_data', 'reject_past_slots', 'reject_overlapping_bookings', mode='before'
    )
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on')
        return bool(v)

    @field_validator('suggestion_failure_policy')
    @classmethod
    def check_failure_policy(cls, v):
        if v not in ("empty", "raise"):
            raise ValueError("suggestion_failure_policy must be 'empty' or 'raise'")
        return v


# Create settings instance
settings = Settings()
