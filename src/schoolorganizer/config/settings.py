from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    canvas_base_url: str = os.getenv("CANVAS_BASE_URL", "").rstrip("/")
    canvas_access_token: str = os.getenv("CANVAS_ACCESS_TOKEN", "")
    canvas_timeout: int = _env_int("CANVAS_TIMEOUT", 15)
    canvas_default_credits: int = _env_int("CANVAS_DEFAULT_CREDITS", 3)

    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = _env_int("PORT", 3001)

    state_file: str = os.getenv("SCHOOL_ORGANIZER_STATE_FILE", "school_organizer_v1.json")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )

    @property
    def canvas_configured(self) -> bool:
        return bool(self.canvas_base_url and self.canvas_access_token)


settings = Settings()
