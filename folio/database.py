# folio/database.py
import os
import logging
from typing import Optional, Dict, List
from datetime import datetime, timezone

import aiosqlite

from folio.config import DATABASE_PATH
from folio.models.schemas import ContactFormData

logger = logging.getLogger(__name__)


class SiteDatabase:
    """SQLite store for contact form messages."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or DATABASE_PATH
        self._initialized = False

    async def initialize(self):
        """Initialize database schema."""
        if self._initialized:
            return

        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        async with aiosqlite.connect(self.db_path) as conn:
            await conn.execute('''
                CREATE TABLE IF NOT EXISTS contact_messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    subject TEXT NOT NULL,
                    message TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            ''')
            await conn.execute(
                'CREATE INDEX IF NOT EXISTS idx_contact_messages_created_at ON contact_messages(created_at DESC)'
            )
            await conn.commit()

        self._initialized = True
        logger.info(f"SQLite site database schema initialized: {self.db_path}")

    async def save_contact_message(self, form: ContactFormData) -> int:
        """Persist a contact message and return its id."""
        await self.initialize()
        now = datetime.now(timezone.utc).isoformat()
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute(
                "INSERT INTO contact_messages (name, email, subject, message, created_at) VALUES (?, ?, ?, ?, ?)",
                (form.name, form.email, form.subject, form.message, now)
            )
            await conn.commit()
            message_id = cursor.lastrowid
        logger.info(f"Stored contact message {message_id} from {form.email}")
        return message_id

    async def get_contact_messages(self, limit: int = 50) -> List[Dict]:
        """Fetch the most recent contact messages."""
        await self.initialize()
        async with aiosqlite.connect(self.db_path) as conn:
            conn.row_factory = aiosqlite.Row
            cursor = await conn.execute(
                "SELECT id, name, email, subject, message, created_at FROM contact_messages ORDER BY id DESC LIMIT ?",
                (limit,)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def count_contact_messages(self) -> int:
        await self.initialize()
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM contact_messages")
            row = await cursor.fetchone()
            return row[0] if row else 0

    async def close(self):
        """Connections are opened per call; nothing is held between requests."""
        self._initialized = False
