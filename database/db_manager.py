import logging
import os
import sqlite3

from utils.constants import DB_FILE, DEFAULT_CATEGORIES, DEFAULT_CURRENCY_SYMBOL

log = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        tx_cols = {row[1] for row in conn.execute("PRAGMA table_info(transactions)").fetchall()}
        if "notes" not in tx_cols:
            log.info("Adding transactions.notes column")
            conn.execute("ALTER TABLE transactions ADD COLUMN notes TEXT")
        cat_cols = {row[1] for row in conn.execute("PRAGMA table_info(categories)").fetchall()}
        if "emoji" not in cat_cols:
            log.info("Adding categories.emoji column")
            conn.execute("ALTER TABLE categories ADD COLUMN emoji TEXT")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS categories (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT NOT NULL UNIQUE,
                color_hex  TEXT NOT NULL DEFAULT '#888888',
                is_expense INTEGER NOT NULL DEFAULT 1,
                emoji      TEXT
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id                 INTEGER PRIMARY KEY AUTOINCREMENT,
                title              TEXT NOT NULL,
                amount             REAL NOT NULL CHECK(amount > 0),
                date               TEXT NOT NULL,
                notes              TEXT,
                is_expense         INTEGER NOT NULL,
                category_id        INTEGER REFERENCES categories(id) ON DELETE RESTRICT,
                person_label       TEXT NOT NULL,
                is_recurring       INTEGER NOT NULL DEFAULT 0,
                recurring_interval TEXT CHECK(recurring_interval IN ('daily','weekly','monthly','yearly')),
                recurring_end_date TEXT,
                is_paid            INTEGER NOT NULL DEFAULT 0
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date        ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_transactions_category_id ON transactions(category_id);

            CREATE TABLE IF NOT EXISTS savings (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                amount       REAL NOT NULL CHECK(amount > 0),
                date         TEXT NOT NULL,
                notes        TEXT,
                person_label TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS overrides (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("appearance_mode", "System"),
            ("currency_symbol", DEFAULT_CURRENCY_SYMBOL),
            ("last_month", ""),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        for cat in DEFAULT_CATEGORIES:
            conn.execute(
                """INSERT OR IGNORE INTO categories(name, color_hex, is_expense, emoji)
                   VALUES (?, ?, ?, ?)""",
                (cat["name"], cat["color_hex"], cat["is_expense"], cat["emoji"]),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open_default(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: open (creating if needed) the application database.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        log.info("Opening database %s", path)
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
