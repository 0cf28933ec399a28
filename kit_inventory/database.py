import os
import urllib.parse
import traceback
from dotenv import load_dotenv
load_dotenv()

# Database configuration (env defaults)
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_USER = os.getenv("DB_USER", "root")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "first_aid_inventory")
DB_PORT = int(os.getenv("DB_PORT", 3306))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# SQLAlchemy Configuration for ORM Models
# ---------------------------------------------------------------------------
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.pool import StaticPool
from typing import Generator
import importlib
import logging

logger = logging.getLogger(__name__)
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))

password_enc = urllib.parse.quote_plus(DB_PASSWORD)
SQLALCHEMY_DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{password_enc}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)


def _engine_kwargs(url: str) -> dict:
    """Pool settings for the configured backend.

    An in-memory SQLite database only lives as long as its connection, so it is
    pinned to a single shared connection.
    """
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if make_url(url).database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_size": 10, "max_overflow": 20, "pool_pre_ping": True}


engine = create_engine(SQLALCHEMY_DATABASE_URL, echo=False, **_engine_kwargs(SQLALCHEMY_DATABASE_URL))

Base = declarative_base()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---------------------------------------------------------------------------
# init_db: create the database (MySQL) and the ORM tables
# ---------------------------------------------------------------------------

MODEL_MODULES = [
    # keep these in sync with files inside kit_inventory/models
    "inspection_model",
    "inspection_request_model",
]


def import_models():
    """Import every model module so Base.metadata knows the schema."""
    for mod in MODEL_MODULES:
        try:
            importlib.import_module(f"kit_inventory.models.{mod}")
            logger.debug(f"Imported model module: kit_inventory.models.{mod}")
        except Exception as e:
            # keep going if one model import fails; print full traceback for diagnosis
            logger.warning(f"Warning: Could not import kit_inventory.models.{mod}: {e}")
            logger.debug(traceback.format_exc())


def _ensure_mysql_database():
    url = make_url(SQLALCHEMY_DATABASE_URL)
    if url.get_backend_name() != "mysql" or not url.database:
        return
    server_engine = create_engine(url.set(database=None), echo=False)
    try:
        with server_engine.begin() as conn:
            conn.execute(text(
                f"CREATE DATABASE IF NOT EXISTS `{url.database}` "
                "DEFAULT CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            ))
        logger.info(f"Database `{url.database}` ensured.")
    finally:
        server_engine.dispose()


def init_db():
    # 1) Create database if missing (connect without database)
    try:
        _ensure_mysql_database()
    except Exception:
        logger.error("ERROR: Could not connect to the database server to create database.")
        logger.error(traceback.format_exc())
        return

    # 2) Import all SQLAlchemy models so Base.metadata knows the schema
    import_models()

    # 3) Create all tables via SQLAlchemy ORM
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Base.metadata.create_all() executed.")
    except Exception:
        logger.warning("Warning: Base.metadata.create_all failed:")
        logger.warning(traceback.format_exc())
