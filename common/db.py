from __future__ import annotations

from pathlib import Path
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from .config import Settings, get_settings


logger = logging.getLogger(__name__)


def _is_memory_sqlite(database: str | None) -> bool:
    return database in (None, "", ":memory:")


def create_db_engine(database_url: str) -> Engine:
    """Crea el engine de SQLAlchemy para la URL dada.

    SQLite en archivo: crea el directorio si no existe.
    SQLite en memoria: una sola conexión compartida (StaticPool), si no cada
    conexión del pool vería una base distinta.
    """
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        engine = create_engine(url, pool_pre_ping=True, pool_recycle=300, future=True)
    elif _is_memory_sqlite(url.database):
        engine = create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            future=True,
        )
    else:
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
            future=True,
        )

    # Log básico de parámetros de conexión (sin contraseña)
    logger.info(
        "[DB] Engine created backend=%s database=%s host=%s",
        url.get_backend_name(),
        url.database,
        url.host,
    )
    return engine


def check_connection(engine: Engine) -> bool:
    """Ejecuta SELECT 1; True si la BD responde."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("[DB] Connection test FAILED")
        return False


def get_engine(settings: Settings | None = None) -> Engine:
    settings = settings or get_settings()
    engine = create_db_engine(settings.database_url)

    if check_connection(engine):
        logger.info("[DB] Connection test OK")

    return engine
