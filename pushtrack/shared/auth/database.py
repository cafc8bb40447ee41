"""Database setup and configuration."""

from sqlalchemy import create_engine, Column, String, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime
import os

# Load environment variables from .env file (for local development)
from dotenv import load_dotenv
load_dotenv()

# DATABASE_URL should be set as an environment variable (e.g., from Heroku)
DATABASE_URL = os.environ.get("DATABASE_URL")

if not DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is required. "
        "Please set it to your PostgreSQL connection string."
    )

# Heroku uses postgres:// but SQLAlchemy 2.0+ requires postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

engine_kwargs = {
    "pool_pre_ping": True,  # Verify connections before using
    "pool_recycle": 3600,  # Recycle connections after 1 hour
}
if DATABASE_URL.startswith("sqlite"):
    # Request handlers run in a threadpool
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


class User(Base):
    """User model for authentication and profile."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    display_name = Column(String, nullable=False)
    photo_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login = Column(DateTime, nullable=True)


def init_db():
    """Initialize database tables."""
    import logging
    from sqlalchemy.exc import SQLAlchemyError
    # Workout session table registers itself on the shared Base
    import pushtrack.pushups.database  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logging.info("Database tables initialized successfully")
    except SQLAlchemyError as e:
        # Let the app start; requests will surface the error
        logging.error(f"Database initialization error: {str(e)}")


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
