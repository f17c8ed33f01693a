"""
Settings Helper - Environment configuration and settings-table parsing

Environment values are read once at import time.
Per-installation overrides (branding, disclaimer text) live in the
`settings` table and are parsed with _parse_value().
"""

import json
import os
from typing import Any

from sqlalchemy import text
from sqlalchemy.orm import Session

# Hosted Postgres database
DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2:///mirega_maintenance")

# External functions host (send-maintenance-report lives here)
FUNCTIONS_BASE_URL = os.getenv("FUNCTIONS_BASE_URL", "http://localhost:54321")
FUNCTIONS_API_KEY = os.getenv("FUNCTIONS_API_KEY", "")
SEND_REPORT_TIMEOUT = float(os.getenv("SEND_REPORT_TIMEOUT", "30"))

# Timezone used for "Generado el ..." and signature timestamps
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/Santiago")


def get_setting(db: Session, category: str, key: str, default: Any = None) -> Any:
    """Get a single setting value from the settings table"""
    row = db.execute(
        text("SELECT value, value_type FROM settings WHERE category = :category AND key = :key"),
        {"category": category, "key": key}
    ).fetchone()

    if not row:
        return default

    return _parse_value(row[0], row[1])


def _parse_value(value: str, value_type: str) -> Any:
    """Parse string value to appropriate type"""
    if value is None:
        return None

    if value_type == 'number':
        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value
    elif value_type == 'boolean':
        return value.lower() in ('true', '1', 'yes')
    elif value_type == 'json':
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


# =============================================================================
# UTC ISO FORMATTING - USE THIS EVERYWHERE FOR DATETIME OUTPUT
# =============================================================================

def format_utc_iso(dt) -> str:
    """
    Format datetime as ISO 8601 with explicit Z suffix for UTC.

    The admin UI parses these strings; without the Z suffix a naive
    timestamp is read as local time.

    Args:
        dt: datetime object (assumed to be UTC) or None

    Returns:
        ISO string with Z suffix, or None if input is None
    """
    if dt is None:
        return None
    if hasattr(dt, 'isoformat'):
        iso = dt.isoformat()
        if hasattr(dt, 'hour') and not iso.endswith('Z') and '+' not in iso and '-' not in iso[-6:]:
            iso += 'Z'
        return iso
    return str(dt)
