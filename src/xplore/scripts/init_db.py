"""Create all database tables for the configured DATABASE_URL."""

from xplore.core.settings import settings
from xplore.db.session import create_tables


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    init_db()
    print(f"Database initialized at {settings.database_url_sync}")
