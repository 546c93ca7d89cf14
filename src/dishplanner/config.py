"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Recipe catalog
    catalog_path: str | None = None  # JSON file; packaged sample catalog when unset
    fuzzy_match_cutoff: float = 80.0  # rapidfuzz score (0-100) for name lookups

    # Selection
    random_seed: int | None = None  # fixed seed makes every draw reproducible
    default_plan_days: int = 7
    max_plan_days: int = 14
    default_min_dishes: int = 3
    default_max_dishes: int = 6

    # Combination timing
    parallel_cooking_factor: float = 0.6  # share of summed cook time when cooking in parallel

    # Estimates
    currency: str = "CNY"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
