import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    database_url: str = "sqlite:///./tourdir.db"
    log_file: str = "server.log"
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    default_radius_km: float = 10.0
    timezone: str = "Africa/Harare"
    maps_api_key: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Builds settings from the process environment.
        A .env file in the working directory is loaded first (shell vars win).
        """
        load_dotenv()

        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            database_url=os.environ.get("DATABASE_URL", "sqlite:///./tourdir.db"),
            log_file=os.environ.get("LOG_FILE", "server.log"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            default_radius_km=float(os.environ.get("DEFAULT_RADIUS_KM", "10")),
            timezone=os.environ.get("TRIP_TIMEZONE", "Africa/Harare"),
            maps_api_key=os.environ.get("GOOGLE_MAPS_API_KEY", ""),
        )
