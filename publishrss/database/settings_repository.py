"""
Settings repository - key/value settings, including the private feed token.
"""

import secrets
from datetime import datetime

from .connection import DatabaseConnection

PRIVATE_TOKEN_KEY = "private_token:{name}"


class SettingsRepository:
    """Repository for application settings."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a setting value."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else default

    def set(self, key: str, value: str):
        """Set a setting value."""
        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO settings (key, value, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                   value = excluded.value, updated_at = excluded.updated_at""",
                (key, value, datetime.now().isoformat())
            )

    def get_private_token(self, name: str = "default") -> str | None:
        return self.get(PRIVATE_TOKEN_KEY.format(name=name))

    def ensure_private_token(self, name: str = "default") -> str:
        """Return the stored token, generating and persisting one on first use."""
        token = self.get_private_token(name)
        if token:
            return token
        token = secrets.token_urlsafe(24)
        self.set(PRIVATE_TOKEN_KEY.format(name=name), token)
        return token

    def regenerate_private_token(self, name: str = "default") -> str:
        token = secrets.token_urlsafe(24)
        self.set(PRIVATE_TOKEN_KEY.format(name=name), token)
        return token
