# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file),
see src/class_portal/config.py.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PORTAL_APP_NAME": "App display name (default: class-portal).",
    "PORTAL_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Storage
    "PORTAL_DATA_DIR": "Local data directory for the database and portal.log (default: .local/class_portal).",
    "PORTAL_STORAGE_BACKEND": "sqlite (default) or memory (nothing survives the session).",
    "PORTAL_STORAGE_DB_PATH": "SQLite key-value file (default: <data_dir>/storage.sqlite3).",
    "PORTAL_STORAGE_QUOTA_CHARS": "Total characters (keys + values) the store may hold (default: 5000000, 0 = unlimited).",
    # Keys
    "PORTAL_TIMETABLE_KEY": "Storage key of the timetable grid (default: class_portal_timetable).",
    "PORTAL_TODO_KEY": "Storage key of the task lists (default: class_portal_todo).",
    # Timetable
    "PORTAL_DEFAULT_COLOR": "Initially selected slot color (default: #e1effe).",
}
