from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    database_ssl: bool = False  # managed Postgres (Neon etc.) needs SSL via asyncpg connect_args
    auto_create_tables: bool = False  # create_all on startup; prefer Alembic in production

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Fallback calendar, used when neither the practitioner nor the practice
    # has calendar settings stored
    default_slot_interval_minutes: int = 60
    default_buffer_minutes: int = 0
    default_start_time: str = "09:00"
    default_end_time: str = "17:00"
    default_working_days: str = "1,2,3,4,5"  # 0=Sunday .. 6=Saturday, names also accepted

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def default_working_days_list(self) -> list[str]:
        return [d.strip() for d in self.default_working_days.split(",") if d.strip()]


settings = Settings()
