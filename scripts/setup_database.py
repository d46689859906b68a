"""
Setup the database for the ClassBeyond badge engine
- Creates the tables and seeds the badge catalog from badges.yaml
"""

import argparse
import os
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def setup_postgresql(settings) -> bool:
    """Create the PostgreSQL database if it does not exist"""

    print("Setting up PostgreSQL database...")

    try:
        # pylint: disable=import-outside-toplevel
        import psycopg2
        from psycopg2 import sql
        from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT

        conn = psycopg2.connect(
            host=settings.POSTGRES_HOST,
            port=settings.POSTGRES_PORT,
            user=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD,
            database="postgres",
        )
        conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)

        cursor = conn.cursor()
        cursor.execute(
            "SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s",
            (settings.POSTGRES_DB,),
        )
        if not cursor.fetchone():
            cursor.execute(
                sql.SQL("CREATE DATABASE {}").format(
                    sql.Identifier(settings.POSTGRES_DB)
                )
            )
            print(f"Database {settings.POSTGRES_DB} created successfully")
        else:
            print(f"Database {settings.POSTGRES_DB} already exists")

        cursor.close()
        conn.close()
        return True
    except ImportError:
        print("❌ psycopg2 is not installed")
        print("   Install: pip install -e '.[postgres]'")
        return False
    except Exception as e:  # pylint: disable=broad-exception-caught
        print(f"❌ Error setting up PostgreSQL database: {e}")
        return False


def main() -> None:
    """DB Setup Script"""
    parser = argparse.ArgumentParser(description="Setup ClassBeyond Badge Database")
    parser.add_argument(
        "--db-type",
        choices=["sqlite", "postgresql"],
        help="Database type to use (overrides DATABASE_TYPE env var)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables first (debug mode only)",
    )
    args = parser.parse_args()

    # settings and the engine are created on import, so the override goes first
    if args.db_type:
        os.environ["DATABASE_TYPE"] = args.db_type
        print(f"⚙️  Using database type from command line: {args.db_type}")

    # pylint: disable=import-outside-toplevel
    from classbeyond.badges.definitions import initialize_badges
    from classbeyond.config import settings
    from classbeyond.core.data import models  # noqa: F401
    from classbeyond.core.data.database import (
        SessionLocal,
        create_tables,
        get_database_info,
        reset_database,
        test_database_connection,
    )

    print("🚀 ClassBeyond Database Setup")
    print(f"Database Type: {settings.DATABASE_TYPE}")
    print()

    if settings.DATABASE_TYPE == "postgresql" and not setup_postgresql(settings):
        sys.exit(1)

    print("Testing database connection...")
    if not test_database_connection():
        sys.exit(1)

    try:
        if args.reset:
            print("Resetting database tables...")
            reset_database()
        else:
            print("Creating database tables...")
            create_tables()
    except Exception as e:  # pylint: disable=broad-exception-caught
        print(f"❌ Error creating database tables: {e}")
        sys.exit(1)

    print("Seeding badge catalog...")
    db = SessionLocal()
    try:
        inserted = initialize_badges(db)
    finally:
        db.close()
    print(f"Badges inserted: {inserted}")

    db_info = get_database_info()
    print("✅ Database setup complete")
    print(f"Database: {db_info['type']} ({db_info.get('version', 'Unknown version')})")
    print(f"Tables: {', '.join(db_info['tables'])}")


if __name__ == "__main__":
    main()
