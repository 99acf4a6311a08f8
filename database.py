# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration (MS SQL Server in production, SQLite locally)
- Session factory for dependency injection
- An explicit transaction boundary for multi-write operations

Usage:
     from database import get_session, atomic

     # In FastAPI routes:
     @router.get("/items")
     def get_items(db: Session = Depends(get_session)):
          return db.query(Item).all()

     # In services:
     with atomic(db):
          db.add(lease)
          db.add(lease_tenant)
     """
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

import config

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False):
     """Create an engine; SQLite gets a single shared connection."""
     if url.startswith("sqlite"):
          return create_engine(
               url,
               poolclass=StaticPool,
               connect_args={"check_same_thread": False},
               echo=echo,
          )
     return create_engine(
          url,
          poolclass=QueuePool,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          echo=echo,
     )


engine = build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
     """
     Context manager for database sessions (for use outside FastAPI routes).

     Usage:
          with get_session_context() as db:
               leases = db.query(Lease).all()
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


@contextmanager
def atomic(db: Session) -> Generator[Session, None, None]:
     """
     Run a block of writes as one transaction on an existing session.

     Commits when the block exits normally. Any exception rolls back
     everything written inside the block and is re-raised.
     """
     try:
          yield db
          db.commit()
     except Exception:
          db.rollback()
          raise


def init_db(bind=None) -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=bind or engine)


def check_connection() -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except Exception:
          logger.exception("Database connection failed")
          return False
