"""SQLite store for the user's remembered branch and zone."""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SETTINGS_DIR = Path.home() / ".tariff-calc"
SETTINGS_DB = SETTINGS_DIR / "settings.db"

BRANCH_KEY = "selected_branch"
ZONE_KEY = "selected_zone"


def _get_conn() -> sqlite3.Connection:
    SETTINGS_DIR.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(SETTINGS_DB)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """)
    conn.commit()
    return conn


def get(key: str) -> Optional[str]:
    """Get a saved value, returning None if missing or unreadable."""
    try:
        conn = _get_conn()
        row = conn.execute(
            "SELECT value FROM settings WHERE key = ?", (key,)
        ).fetchone()
        conn.close()
        return row[0] if row else None
    except (sqlite3.Error, OSError) as e:
        logger.warning(f"Settings get error: {e}")
        return None


def set(key: str, value: str) -> None:
    """Save a value, replacing any previous one."""
    try:
        conn = _get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()
        conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.warning(f"Settings set error: {e}")


def delete(key: str) -> None:
    try:
        conn = _get_conn()
        conn.execute("DELETE FROM settings WHERE key = ?", (key,))
        conn.commit()
        conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.warning(f"Settings delete error: {e}")


def clear_all() -> None:
    """Forget every saved setting."""
    try:
        conn = _get_conn()
        conn.execute("DELETE FROM settings")
        conn.commit()
        conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.warning(f"Settings clear_all error: {e}")


def save_selection(branch_id: str, zone_id: Optional[str] = None) -> None:
    """Remember the branch, and the zone if given (otherwise forget it)."""
    set(BRANCH_KEY, branch_id)
    if zone_id:
        set(ZONE_KEY, zone_id)
    else:
        delete(ZONE_KEY)


def load_selection() -> tuple[Optional[str], Optional[str]]:
    """Return the saved (branch_id, zone_id); either may be None."""
    return get(BRANCH_KEY), get(ZONE_KEY)
