"""Typed settings loader for the weather acquisition engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    bulletin_base_url: AnyUrl = Field(
        default="https://dd.weather.gc.ca/citypage_weather/xml",
        alias="BULLETIN_BASE_URL",
    )
    bulletin_timeout_seconds: float = Field(default=10.0, alias="BULLETIN_TIMEOUT_SECONDS")
    bulletin_cache_ttl_seconds: int = Field(default=300, alias="BULLETIN_CACHE_TTL_SECONDS")

    satellite_base_url: AnyUrl = Field(
        default="https://power.larc.nasa.gov/api/temporal/daily/point",
        alias="SATELLITE_BASE_URL",
    )
    satellite_timeout_seconds: float = Field(default=30.0, alias="SATELLITE_TIMEOUT_SECONDS")
    satellite_cache_ttl_seconds: int = Field(default=86400, alias="SATELLITE_CACHE_TTL_SECONDS")
    satellite_parameters: str = Field(
        default="T2M,T2M_MAX,T2M_MIN,PRECTOTCORR,RH2M,WS2M",
        alias="SATELLITE_PARAMETERS",
    )
    satellite_community: str = Field(default="AG", alias="SATELLITE_COMMUNITY")

    http_user_agent: str = Field(
        default="Agricast/1.0 (Weather verification for farmers)",
        alias="HTTP_USER_AGENT",
    )

    cache_backend: Literal["file", "memory"] = Field(default="file", alias="CACHE_BACKEND")
    cache_dir: Path = Field(default=Path("./data/cache"), alias="CACHE_DIR")

    warm_concurrency: int = Field(default=3, alias="WARM_CONCURRENCY")
    warm_batch_pause_seconds: float = Field(default=1.0, alias="WARM_BATCH_PAUSE_SECONDS")

    pop_chance_of_estimate_pct: int = Field(default=30, alias="POP_CHANCE_OF_ESTIMATE_PCT")
    pop_periods_of_estimate_pct: int = Field(default=70, alias="POP_PERIODS_OF_ESTIMATE_PCT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric limits and required text fields."""
        if self.bulletin_timeout_seconds <= 0:
            raise ValueError("BULLETIN_TIMEOUT_SECONDS must be > 0.")
        if self.satellite_timeout_seconds <= 0:
            raise ValueError("SATELLITE_TIMEOUT_SECONDS must be > 0.")
        if self.bulletin_cache_ttl_seconds <= 0:
            raise ValueError("BULLETIN_CACHE_TTL_SECONDS must be > 0.")
        if self.satellite_cache_ttl_seconds <= 0:
            raise ValueError("SATELLITE_CACHE_TTL_SECONDS must be > 0.")
        if "PRECTOTCORR" not in self._parameter_list():
            raise ValueError("SATELLITE_PARAMETERS must include PRECTOTCORR.")
        if not self.satellite_community.strip():
            raise ValueError("SATELLITE_COMMUNITY must not be empty.")
        if not self.http_user_agent.strip():
            raise ValueError("HTTP_USER_AGENT must not be empty.")
        if self.warm_concurrency <= 0:
            raise ValueError("WARM_CONCURRENCY must be > 0.")
        if self.warm_batch_pause_seconds < 0:
            raise ValueError("WARM_BATCH_PAUSE_SECONDS must be >= 0.")
        if not (0 <= self.pop_chance_of_estimate_pct <= 100):
            raise ValueError("POP_CHANCE_OF_ESTIMATE_PCT must be between 0 and 100.")
        if not (0 <= self.pop_periods_of_estimate_pct <= 100):
            raise ValueError("POP_PERIODS_OF_ESTIMATE_PCT must be between 0 and 100.")
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL {self.log_level!r} is not a logging level name.")
        return self

    def _parameter_list(self) -> list[str]:
        return [item.strip() for item in self.satellite_parameters.split(",") if item.strip()]

    def safe_summary(self) -> dict[str, Any]:
        """Return a config summary suitable for logging."""
        return {
            "app_env": self.app_env,
            "bulletin_base_url": str(self.bulletin_base_url),
            "bulletin_timeout_seconds": self.bulletin_timeout_seconds,
            "bulletin_cache_ttl_seconds": self.bulletin_cache_ttl_seconds,
            "satellite_base_url": str(self.satellite_base_url),
            "satellite_timeout_seconds": self.satellite_timeout_seconds,
            "satellite_cache_ttl_seconds": self.satellite_cache_ttl_seconds,
            "satellite_parameters": self._parameter_list(),
            "cache_backend": self.cache_backend,
            "cache_dir": str(self.cache_dir),
            "warm_concurrency": self.warm_concurrency,
            "warm_batch_pause_seconds": self.warm_batch_pause_seconds,
            "pop_chance_of_estimate_pct": self.pop_chance_of_estimate_pct,
            "pop_periods_of_estimate_pct": self.pop_periods_of_estimate_pct,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    if settings.cache_backend == "file":
        try:
            settings.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"Failed creating CACHE_DIR ({settings.cache_dir}): {exc}") from exc
    return settings
