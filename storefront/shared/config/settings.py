import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()

DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
)


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        # Plain postgres URLs need the async driver
        if url.startswith("postgresql://"):
            return "postgresql+asyncpg://" + url[len("postgresql://"):]
        if url.startswith("postgres://"):
            return "postgresql+asyncpg://" + url[len("postgres://"):]
        return url

    db_user = os.getenv("POSTGRES_USER", "postgres")
    db_password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db_host = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
    db_port = os.getenv("POSTGRES_PORT", "5433")
    db_name = os.getenv("POSTGRES_DB", "ecommerce")
    return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


@dataclass(frozen=True)
class Settings:
    database_url: str
    sql_echo: bool = False
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    service_name: str = "storefront"
    otlp_endpoint: str | None = None
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ALLOWED_ORIGINS)


def load_settings() -> Settings:
    """Reads the process environment (and .env, if present) into Settings."""
    frontend_url = os.getenv("FRONTEND_URL", "")
    origins = tuple(o for o in (*DEFAULT_ALLOWED_ORIGINS, frontend_url) if o)

    return Settings(
        database_url=_database_url(),
        sql_echo=_as_bool(os.getenv("SQL_ECHO")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3001")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        service_name=os.getenv("SERVICE_NAME", "storefront"),
        otlp_endpoint=os.getenv("OTLP_ENDPOINT") or None,
        allowed_origins=origins,
    )
