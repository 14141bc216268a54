import logging
import os
import sqlite3
from contextlib import closing

logger = logging.getLogger(__name__)

# Shipped inside the package as data files
DEFAULT_MIGRATIONS_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "migrations"
)

DOWN_MARKER = "-- Down"


class SQLiteMigrator:
    """Applies numbered ``.sql`` files from the migrations directory in order."""

    def __init__(self, db_path: str, migrations_dir: str = DEFAULT_MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = migrations_dir

    def available(self) -> list[str]:
        return sorted(f for f in os.listdir(self.migrations_dir) if f.endswith(".sql"))

    def pending(self) -> list[str]:
        """Migration filenames not yet recorded in the database."""
        with closing(sqlite3.connect(self.db_path)) as conn:
            done = self._applied(conn)
            conn.commit()
        return [f for f in self.available() if f not in done]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations and return the filenames applied."""
        todo = self.pending()
        if not todo:
            return []

        conn = sqlite3.connect(self.db_path)
        try:
            for filename in todo:
                logger.info("Applying migration: %s", filename)
                self._apply(conn, filename)
        finally:
            conn.close()
        return todo

    def _applied(self, conn: sqlite3.Connection) -> set[str]:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS _migrations ("
            " id INTEGER PRIMARY KEY AUTOINCREMENT,"
            " filename TEXT UNIQUE NOT NULL,"
            " applied_at DATETIME DEFAULT CURRENT_TIMESTAMP)"
        )
        return {row[0] for row in conn.execute("SELECT filename FROM _migrations")}

    def _apply(self, conn: sqlite3.Connection, filename: str) -> None:
        with open(os.path.join(self.migrations_dir, filename)) as f:
            # Only the part above the down marker is run
            script = f.read().split(DOWN_MARKER, 1)[0]
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (filename,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
