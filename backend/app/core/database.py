from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import settings


def _connect_args(url: str) -> dict:
    """Driver-level timeouts so a stuck store surfaces as an error instead of hanging"""
    if url.startswith("sqlite"):
        # check_same_thread=False: FastAPI may hand the session to another worker thread
        return {"check_same_thread": False, "timeout": settings.DB_POOL_TIMEOUT}
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"}
    return {}


def build_engine(url: str, **kwargs):
    """Create an engine with the connect args matching the URL's dialect"""
    options = {"connect_args": _connect_args(url)}
    if not url.startswith("sqlite"):
        options["pool_timeout"] = settings.DB_POOL_TIMEOUT
        options["pool_pre_ping"] = True
    options.update(kwargs)
    return create_engine(url, **options)


# Create database engine - manages connection pool
engine = build_engine(settings.DATABASE_URL)

# Create session factory - each request gets a new session
# autocommit=False: Changes require explicit commit
# autoflush=False: Don't auto-flush before queries
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all database models
Base = declarative_base()


def get_db():
    """
    Dependency for getting database session.

    The session is closed after the request completes, even if the
    handler raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
