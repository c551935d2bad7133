# db.py
# Role: Database bootstrap for the business manager.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.
#       Also ensures the on-disk database directory exists before the app starts.

"""
Database setup for the business manager.

- Uses DATABASE_URL from the environment when set.
- Otherwise uses a SQLite database at: <project_root>/database/business.db
  and ensures the 'database' folder exists.
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import get_settings

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Folder for the default SQLite DB (created on startup if missing)
DB_DIR = os.path.join(BASE_DIR, "database")

# Full path to the default SQLite database file
DB_PATH = os.path.join(DB_DIR, "business.db")


def _database_url() -> str:
    url = get_settings().database_url
    if url:
        return url
    os.makedirs(DB_DIR, exist_ok=True)  # ensure folder exists
    return f"sqlite:///{DB_PATH}"


# SQLAlchemy connection URL
DATABASE_URL = _database_url()

# For SQLite, we need check_same_thread=False for FastAPI (threaded request handling)
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
