"""
Database connection for the maintenance admin backend
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from settings_helper import DATABASE_URL

engine = create_engine(
    DATABASE_URL,
    pool_size=5,            # Base connections to keep open
    max_overflow=10,        # Additional connections when busy
    pool_timeout=30,        # Seconds to wait for connection before error
    pool_recycle=1800,      # Recycle connections after 30 min (hosted DB drops idle ones)
    pool_pre_ping=True,     # Test connections before using
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


LIKE_ESCAPE = "\\"


def contains_pattern(value: str) -> str:
    """LIKE pattern matching `value` literally anywhere (use with escape=LIKE_ESCAPE)."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
