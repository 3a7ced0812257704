import logging
from datetime import datetime, timezone

from sqlalchemy import create_engine, text
from sqlalchemy.exc import ProgrammingError, OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)

database_url = settings.sqlalchemy_url

# Handle SQLite special case for check_same_thread
connect_args = {}
if database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    database_url,
    connect_args=connect_args,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime, the storage convention for every DateTime column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def create_tables():
    """Create all tables in the database"""
    from . import models  # noqa: F401  registers every table on Base.metadata
    Base.metadata.create_all(bind=engine)


# Columns added to passenger_records after the first release.
# create_all() never alters an existing table, so older databases get them here.
COLUMN_MIGRATIONS = [
    ("passenger_records.original_pax", "ALTER TABLE passenger_records ADD COLUMN original_pax INTEGER NOT NULL DEFAULT 0"),
    ("passenger_records.notes", "ALTER TABLE passenger_records ADD COLUMN notes TEXT"),
    ("passenger_records.checked_in_by", "ALTER TABLE passenger_records ADD COLUMN checked_in_by VARCHAR(256)"),
    ("archive_passenger_records.original_pax", "ALTER TABLE archive_passenger_records ADD COLUMN original_pax INTEGER NOT NULL DEFAULT 0"),
    ("archive_passenger_records.notes", "ALTER TABLE archive_passenger_records ADD COLUMN notes TEXT"),
    ("archive_passenger_records.checked_in_by", "ALTER TABLE archive_passenger_records ADD COLUMN checked_in_by VARCHAR(256)"),
]


def run_migrations(bind=None):
    """Add late columns to tables created by an older release"""
    bind = bind or engine

    with bind.connect() as conn:
        for name, sql in COLUMN_MIGRATIONS:
            try:
                conn.execute(text(sql))
                conn.commit()
                logger.info("Migration applied: %s", name)
            except (ProgrammingError, OperationalError) as e:
                # SQLite says "duplicate column name", PostgreSQL "already exists"
                if "already exists" not in str(e) and "duplicate" not in str(e).lower():
                    logger.warning("Migration %s failed: %s", name, e)
                conn.rollback()
