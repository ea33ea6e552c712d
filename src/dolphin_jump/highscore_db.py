"""
highscore_db.py: SQLite persistence for the single best-score value.
"""

import logging
import sqlite3

from .constants import DB_FILE, HIGHSCORE_KEY

logger = logging.getLogger(__name__)


class HighScoreStore:
    """Reads and raises one integer stored under a fixed key."""

    def __init__(self, db_file: str = DB_FILE, key: str = HIGHSCORE_KEY):
        self.key = key
        self.conn = sqlite3.connect(db_file)
        self.cur = self.conn.cursor()
        self.setup()
        logger.info("High score database: %s", db_file)

    def setup(self):
        """Creates the table if it doesn't exist."""
        self.cur.execute("""
            CREATE TABLE IF NOT EXISTS HighScores (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        """)
        self.conn.commit()

    def read_best(self) -> int:
        """Returns the stored best score, or 0 if it is absent or unreadable."""
        self.cur.execute("SELECT value FROM HighScores WHERE key=?", (self.key,))
        row = self.cur.fetchone()
        if row is None:
            return 0
        try:
            best = int(row[0])
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid stored high score %r", row[0])
            return 0
        return max(best, 0)

    def save_best(self, score: int) -> int:
        """Stores score if it beats the current best. Returns the best after the write."""
        current = self.read_best()
        if score <= current:
            return current
        self.cur.execute(
            "INSERT OR REPLACE INTO HighScores (key, value) VALUES (?, ?)", (self.key, str(score)))
        self.conn.commit()
        return score

    def close(self):
        self.conn.close()
