#!/usr/bin/env python3
"""Migration script to add the workout_sessions table for saved pushup sessions."""

import os
import sys
from sqlalchemy import create_engine, text, inspect
from dotenv import load_dotenv

load_dotenv()

# Get database URL
DATABASE_URL = os.environ.get("DATABASE_URL")
if not DATABASE_URL:
    print("ERROR: DATABASE_URL environment variable is required.")
    sys.exit(1)

# Fix Heroku postgres:// URL
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

engine = create_engine(DATABASE_URL)


def table_exists(connection, table_name):
    """Check if a table exists."""
    inspector = inspect(connection)
    return table_name in inspector.get_table_names()


def run_migration():
    print("Running migration to add workout_sessions table...")
    print(f"Database: {engine.url.host}:{engine.url.port}/{engine.url.database}")
    print()

    with engine.connect() as connection:
        if not table_exists(connection, 'users'):
            print("ERROR: users table does not exist. Start the service once to create it.")
            sys.exit(1)

        if not table_exists(connection, 'workout_sessions'):
            print("Creating workout_sessions table...")
            connection.execute(text("""
                CREATE TABLE workout_sessions (
                    id VARCHAR PRIMARY KEY,
                    user_id VARCHAR NOT NULL,
                    display_name VARCHAR NOT NULL DEFAULT 'Anonymous',
                    photo_url VARCHAR,
                    reps INTEGER NOT NULL DEFAULT 0,
                    good_reps INTEGER NOT NULL DEFAULT 0,
                    excellent_reps INTEGER NOT NULL DEFAULT 0,
                    pro_type VARCHAR NOT NULL,
                    start_time TIMESTAMP NOT NULL,
                    duration_seconds INTEGER NOT NULL DEFAULT 0,
                    recorded_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    CONSTRAINT fk_workout_sessions_user FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
                )
            """))
            print("Creating indexes on workout_sessions table...")
            connection.execute(text("CREATE INDEX ix_workout_sessions_user_id ON workout_sessions(user_id)"))
            connection.execute(text("CREATE INDEX ix_workout_sessions_recorded_at ON workout_sessions(recorded_at)"))
            connection.execute(text("CREATE INDEX idx_workout_sessions_user_recorded ON workout_sessions(user_id, recorded_at)"))
            print("✓ Created workout_sessions table with indexes.")
        else:
            print("✓ Table 'workout_sessions' already exists.")

        connection.commit()
        print("\n✓ Migration completed successfully!")


if __name__ == "__main__":
    try:
        run_migration()
    except Exception as e:
        print(f"\n✗ Migration failed with error: {str(e)}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
