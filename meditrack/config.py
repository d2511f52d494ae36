import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

import dotenv


@dataclass(frozen=True)
class Settings:
    app_name: str
    version: str
    log_level: str
    allowed_origins: List[str]
    default_duration_bucket: str
    host: str = "0.0.0.0"
    port: int = 8000


def _parse_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    dotenv.load_dotenv(dotenv_path=os.getenv("MEDITRACK_ENV_FILE", ".env"))
    return Settings(
        app_name=os.getenv("APP_NAME", "MediTrack Triage"),
        version=os.getenv("APP_VERSION", "0.1.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        allowed_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS", "")),
        default_duration_bucket=os.getenv("DEFAULT_DURATION_BUCKET", "days"),
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=int(os.getenv("APP_PORT", 8000)),
    )
