"""Centralized configuration for librarian-search using Pydantic Settings."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``LIBRARIAN_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LIBRARIAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Index settings
    gram_length: int = Field(default=3, ge=1, description="Byte length of the grams indexed per field")
    title_boost: float = Field(default=1.0, ge=0.0, description="Multiplier applied to title field scores")
    authors_boost: float = Field(default=1.0, ge=0.0, description="Multiplier applied to authors field scores")
    keywords_boost: float = Field(default=1.0, ge=0.0, description="Multiplier applied to keywords field scores")

    # Query settings
    default_search_limit: int = Field(default=20, ge=0, description="Result limit used when callers pass none")
    max_search_limit: int = Field(default=1000, ge=1, description="Upper bound applied to requested limits")

    # Observability
    service_name: str = Field(default="librarian-search", description="Service name reported to telemetry")
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus/OTel metrics for operations")

    @model_validator(mode="after")
    def _check_limits(self) -> "Settings":
        if self.default_search_limit > self.max_search_limit:
            raise ValueError(
                "LIBRARIAN_DEFAULT_SEARCH_LIMIT must not exceed LIBRARIAN_MAX_SEARCH_LIMIT "
                f"({self.default_search_limit} > {self.max_search_limit})"
            )
        return self

    @property
    def field_boosts(self) -> dict[str, float]:
        return {
            "title": self.title_boost,
            "authors": self.authors_boost,
            "keywords": self.keywords_boost,
        }

    def clamp_limit(self, limit: int | None) -> int:
        """Resolve a caller-supplied limit against the configured bounds."""
        if limit is None:
            return self.default_search_limit
        return max(0, min(limit, self.max_search_limit))


def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
