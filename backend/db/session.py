import os
import re
from urllib.parse import quote_plus

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

load_dotenv()


def _normalize_database_url(raw_url: str) -> str:
    cleaned = re.sub(r"\s+", "", (raw_url or "").strip())
    if cleaned.startswith("postgres://"):
        cleaned = "postgresql://" + cleaned[len("postgres://") :]
    return cleaned


def database_url_from_env() -> str:
    """
    DATABASE_URL wins; otherwise the URL is assembled from the DB_* parts
    the dashboard deployment exports.
    """
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return _normalize_database_url(explicit)

    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432").strip() or "5432"
    name = os.getenv("DB_NAME", "postgres")

    credentials = quote_plus(user)
    if password:
        credentials += ":" + quote_plus(password)
    return f"postgresql://{credentials}@{host}:{int(port)}/{name}"


def engine_options(url: str) -> dict:
    engine_kwargs = {
        "pool_pre_ping": True,
    }

    if url.startswith("postgresql"):
        engine_kwargs.update(
            {
                "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "1800")),
                "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
                "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),
            }
        )

        # "require" encrypts without verifying the server certificate
        sslmode = os.getenv("DB_SSLMODE", "require").strip()
        if sslmode and "sslmode=" not in url:
            engine_kwargs["connect_args"] = {"sslmode": sslmode}

    return engine_kwargs


SessionLocal = sessionmaker(autocommit=False, autoflush=False)
_engine: Engine | None = None


def init_engine(url: str | None = None, **overrides) -> Engine:
    global _engine
    if _engine is not None:
        return _engine

    database_url = _normalize_database_url(url) if url else database_url_from_env()
    kwargs = engine_options(database_url)
    kwargs.update(overrides)
    _engine = create_engine(database_url, **kwargs)
    SessionLocal.configure(bind=_engine)
    return _engine


def get_engine() -> Engine:
    return _engine if _engine is not None else init_engine()


def dispose_engine() -> None:
    global _engine
    if _engine is None:
        return None
    _engine.dispose()
    _engine = None
    return None
