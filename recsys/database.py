"""
Database Module - Tabel ratings (SQLite/PostgreSQL) dengan SQLAlchemy
"""

from sqlalchemy import create_engine, select, Column, BigInteger, String, Float
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool, NullPool
from typing import Optional
import logging

import pandas as pd

from recsys.config import DATABASE_URL

logger = logging.getLogger(__name__)

Base = declarative_base()

# Global variables untuk lazy initialization (hanya untuk DATABASE_URL default)
_engine = None
_SessionLocal = None


def normalize_database_url(database_url: str) -> str:
    """Fix untuk Heroku/Railway format postgres:// -> postgresql://"""
    if database_url and database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql://", 1)
    return database_url


def create_db_engine(database_url: str) -> Engine:
    """Buat engine baru untuk URL tertentu"""
    database_url = normalize_database_url(database_url)

    if database_url.startswith("sqlite"):
        # SQLite - untuk local development dan test (in-memory butuh StaticPool)
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )

    # PostgreSQL - NullPool, koneksi dibuka hanya selama pembacaan
    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool
    )


def get_engine() -> Engine:
    """Get atau create engine untuk DATABASE_URL dari config (lazy initialization)"""
    global _engine

    if _engine is None:
        _engine = create_db_engine(DATABASE_URL)

    return _engine


def get_session_local():
    """Get SessionLocal class"""
    global _SessionLocal

    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())

    return _SessionLocal


class Rating(Base):
    """Model untuk rating user terhadap item"""
    __tablename__ = "ratings"

    user_id = Column(BigInteger, primary_key=True)
    movie_id = Column(BigInteger, primary_key=True)
    rating = Column(Float, nullable=True)
    timestamp = Column(BigInteger, nullable=True)

    def __repr__(self):
        return f"<Rating(user_id={self.user_id}, movie_id={self.movie_id}, rating={self.rating})>"


def init_db(engine: Optional[Engine] = None):
    """Inisialisasi database - buat semua tabel"""
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database tables created on {engine.url.render_as_string(hide_password=True)}")


def get_session():
    """Get database session (non-generator)"""
    SessionLocal = get_session_local()
    return SessionLocal()


def load_ratings_from_db(
    database_url: Optional[str] = None,
    engine: Optional[Engine] = None
) -> pd.DataFrame:
    """
    Baca seluruh tabel ratings ke DataFrame

    Args:
        database_url: URL database (default: DATABASE_URL dari config)
        engine: Engine yang sudah ada (prioritas di atas database_url)

    Returns:
        DataFrame dengan kolom user_id, movie_id, rating
    """
    # engine yang dibuat di sini dibuang lagi setelah dibaca
    owned = engine is None and bool(database_url)
    if engine is None:
        engine = create_db_engine(database_url) if database_url else get_engine()

    stmt = select(Rating.user_id, Rating.movie_id, Rating.rating)

    try:
        with engine.connect() as connection:
            df = pd.read_sql(stmt, connection)
    finally:
        if owned:
            engine.dispose()

    logger.info(f"Loaded {len(df)} ratings from database")

    return df
