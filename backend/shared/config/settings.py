"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


BACKEND_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    # Storage - flat JSON collections, one file per collection
    data_dir: Path = BACKEND_DIR / "data"
    # Exported report artifacts
    reports_dir: Path = BACKEND_DIR / "reports"

    # Logging
    log_dir: Path = BACKEND_DIR / "logs"
    log_to_file: bool = False

    # Server
    api_port: int = 3000

    # Comma-separated list of allowed origins (empty uses default localhost list)
    allowed_origins: str = ""

    # Environment
    environment: str = "development"
    debug: bool = True

    # Inventory
    default_alert_threshold: int = 5
    expiring_soon_days: int = 3  # Window used by the inventory summary
    default_expiring_window_days: int = 7  # Window for GET /inventory/expiring
    max_batch_size: int = 100

    # Seed sample data when the data directory is empty
    seed_sample_data: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def validate_production_settings(self) -> list[str]:
        """
        Validate that settings are safe for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if not self.allowed_origins:
                errors.append(
                    "ALLOWED_ORIGINS must be configured in production"
                )

            if self.seed_sample_data:
                errors.append(
                    "SEED_SAMPLE_DATA should be disabled in production"
                )

        return errors

    def get_allowed_origins(self) -> list[str]:
        """Parse the comma-separated origin list, falling back to local dev ports."""
        if self.allowed_origins:
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
