"""Configuration management"""

from pathlib import Path
from typing import Optional, Set

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/medialibrary.db"

    # Directories
    BASE_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = DATA_DIR / "logs"
    STATIC_DIR: Path = BASE_DIR / "public"  # Built frontend (optional)

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8787
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5173"  # Comma-separated

    # TMDB
    TMDB_API_KEY: Optional[str] = None
    TMDB_WATCH_REGION: str = "DE"
    # Netflix, Prime Video, Disney+, Apple TV+, WOW, Paramount+, Joyn, RTL+, Crunchyroll
    TMDB_PROVIDER_IDS: str = "8,9,337,350,30,531,304,298,283"

    # Provider cache
    CACHE_TTL_MIN_DAYS: int = 5
    CACHE_TTL_MAX_DAYS: int = 10
    EPISODE_CACHE_TTL_DAYS: int = 30
    HLTB_TOKEN_TTL_MINUTES: int = 30

    # Library
    NEXT_UP_LIMIT: int = 6

    class Config:
        env_file = ".env"
        case_sensitive = True

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure directories exist
        self.DATA_DIR.mkdir(exist_ok=True, parents=True)
        self.LOGS_DIR.mkdir(exist_ok=True, parents=True)

    @property
    def provider_ids(self) -> Set[int]:
        """Allowed TMDB streaming provider ids"""
        return {
            int(value)
            for value in self.TMDB_PROVIDER_IDS.split(",")
            if value.strip().isdigit()
        }

    @property
    def allowed_origins(self):
        if not self.ALLOWED_ORIGINS:
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


# Global settings instance
settings = Settings()
