import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PATH = Path(__file__).parent.parent / ".env"

DEFAULT_PORT = 8080
DEFAULT_DOMAIN = "http://localhost:8080"
DB_FILENAME = "shortlink.db"


@dataclass(frozen=True)
class Settings:
    api_token: str
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    short_domain: str = DEFAULT_DOMAIN
    database_url: str = f"sqlite:///{DB_FILENAME}"
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    def short_url(self, code: str) -> str:
        return self.short_domain.rstrip("/") + "/" + code


def load_settings() -> Settings:
    load_dotenv(ENV_PATH)

    api_token = (os.getenv("API_TOKEN") or "").strip()
    if not api_token:
        raise RuntimeError("API_TOKEN is not set")

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        data_dir = Path(os.getenv("DATA_DIR", "."))
        database_url = f"sqlite:///{data_dir / DB_FILENAME}"

    origins = tuple(
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    )

    return Settings(
        api_token=api_token,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", DEFAULT_PORT)),
        short_domain=os.getenv("SHORT_DOMAIN") or DEFAULT_DOMAIN,
        database_url=database_url,
        cors_origins=origins or ("*",),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
