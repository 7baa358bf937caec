import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


def _env_origins() -> tuple[str, ...]:
    # CORS_ORIGINS wins; otherwise the single frontend URL
    raw = os.getenv("CORS_ORIGINS") or os.getenv("FRONTEND_BASE_URL", "http://localhost:5173")
    return tuple(origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    app_name: str
    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    issuer: str
    cors_origins: tuple[str, ...]
    database_url: str
    database_sslmode: str
    sql_echo: bool
    log_level: str
    payroll_days_per_month: int
    dashboard_recent_activity_limit: int


settings = Settings(
    app_name=os.getenv("APP_NAME", "Garage Back-Office API"),
    secret_key=os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION_32_CHAR_MIN_SECRET_KEY"),
    algorithm=os.getenv("ALGORITHM", "HS256"),
    access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 12, min_value=1),
    issuer=os.getenv("TOKEN_ISSUER", "garage-backoffice-api"),
    cors_origins=_env_origins(),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./garage.db"),
    database_sslmode=os.getenv("DATABASE_SSLMODE", "prefer"),
    sql_echo=_env_bool("SQL_ECHO", False),
    log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    payroll_days_per_month=_env_int("PAYROLL_DAYS_PER_MONTH", 30, min_value=1),
    dashboard_recent_activity_limit=_env_int("DASHBOARD_RECENT_ACTIVITY_LIMIT", 20, min_value=1),
)
