"""Application configuration with environment-based settings."""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Variant(str, Enum):
    COACH = "coach"
    ELITE_MINDSET = "elite-mindset"


# Port used when PORT is unset or not a number
DEFAULT_PORTS = {
    Variant.COACH: 8080,
    Variant.ELITE_MINDSET: 8000,
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: str | None = None  # Parsed leniently, see resolve_port()
    VARIANT: Variant = Variant.ELITE_MINDSET

    # Widget assets (elite-mindset only)
    ASSETS_DIR: str | None = None  # Defaults to <project>/assets

    # Logging
    LOG_LEVEL: str = "INFO"
    USAGE_LOG_DESTINATION: str = "stdout"  # stdout, file, or external
    USAGE_LOG_FILE_PATH: str = "logs/usage.log"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def assets_dir(self) -> Path:
        if self.ASSETS_DIR:
            return Path(self.ASSETS_DIR).resolve()
        return PROJECT_ROOT / "assets"

    def resolve_port(self, variant: Variant) -> int:
        """Return PORT as an int, falling back to the variant default."""
        if self.PORT is not None:
            try:
                return int(self.PORT.strip())
            except ValueError:
                pass
        return DEFAULT_PORTS[variant]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
