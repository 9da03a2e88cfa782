from dataclasses import dataclass
from datetime import datetime
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Triage scoring
    overload_threshold: int = 5
    crime_type_weight: float = 1.2
    facility_type_weight: float = 1.0
    high_priority_threshold: int = 60
    supervisors_in_pool: bool = False

    # Staff workload detail
    stale_after_days: int = 3
    overdue_after_days: int = 14
    recent_window_days: int = 7

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Database
    db_path: str = "./data/triage.db"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    # Optional fixed clock for reproducible dashboards (ISO timestamp, validated at startup)
    frozen_now: Optional[datetime] = None

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


settings = Settings()


@dataclass(frozen=True)
class ScoringConfig:
    """Immutable view of the scoring knobs, taken once per request."""
    overload_threshold: int = 5
    crime_type_weight: float = 1.2
    facility_type_weight: float = 1.0
    high_priority_threshold: int = 60
    supervisors_in_pool: bool = False
    stale_after_days: int = 3
    overdue_after_days: int = 14
    recent_window_days: int = 7

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "ScoringConfig":
        s = source or settings
        return cls(
            overload_threshold=s.overload_threshold,
            crime_type_weight=s.crime_type_weight,
            facility_type_weight=s.facility_type_weight,
            high_priority_threshold=s.high_priority_threshold,
            supervisors_in_pool=s.supervisors_in_pool,
            stale_after_days=s.stale_after_days,
            overdue_after_days=s.overdue_after_days,
            recent_window_days=s.recent_window_days,
        )
