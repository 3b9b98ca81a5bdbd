"""PostgreSQL connection and session factory (only when DATABASE_URL is configured)."""

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings


def build_session_factory(settings: Settings) -> sessionmaker[Session]:
    """Create the engine and a session factory bound to it. Does not connect yet."""
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL is not configured")
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        echo=settings.DEBUG,
    )
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
