#!/usr/bin/env python3
"""Migration script to add photo_url column to users table for profile pictures."""

import os
import sys
from sqlalchemy import create_engine, text, inspect
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL")

if not DATABASE_URL:
    print("ERROR: DATABASE_URL environment variable is required.")
    sys.exit(1)

# Heroku uses postgres:// but SQLAlchemy 2.0+ requires postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# Create engine
engine = create_engine(DATABASE_URL)

def column_exists(connection, table_name, column_name):
    """Check if a column exists in a table."""
    inspector = inspect(connection)
    columns = inspector.get_columns(table_name)
    return any(c['name'] == column_name for c in columns)

def run_migration():
    print("Running migration to add photo_url column to users table...")
    print(f"Database: {engine.url.host}:{engine.url.port}/{engine.url.database}")

    with engine.connect() as connection:
        if not column_exists(connection, 'users', 'photo_url'):
            print("Adding photo_url column to users table...")
            connection.execute(text("ALTER TABLE users ADD COLUMN photo_url VARCHAR"))
            print("✓ Successfully added photo_url column to users table.")
        else:
            print("✓ Column 'photo_url' already exists in 'users' table.")

        connection.commit()

    print("\n✓ Migration completed successfully!")

if __name__ == "__main__":
    run_migration()
