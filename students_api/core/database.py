from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

def create_db_engine(storage_path: str, echo: bool = False) -> Engine:
    """
    Create the SQLite engine backing the student store.

    The parent directory of storage_path is created when missing.
    The engine (and its connection pool) is shared by every request.
    """
    Path(storage_path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{storage_path}",

        # Connections are handed to FastAPI's worker threads
        connect_args={"check_same_thread": False},

        # SQL echo - useful for debugging
        echo=echo,
    )
    event.listen(engine, "connect", _on_connect)
    return engine


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,  # Don't auto-commit transactions
        autoflush=False,   # Don't auto-flush before queries
        bind=engine,
        expire_on_commit=False  # Don't expire objects after commit
    )


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables(engine: Engine):
    """
    Create all database tables defined in models.
    Tables that already exist are left untouched.
    """
    # Models must be imported so they are registered on Base.metadata
    from students_api.models import student  # noqa: F401

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


# =============================================================================
# EVENT LISTENERS
# =============================================================================

def _on_connect(dbapi_conn, connection_record):
    logger.debug("New database connection established")
