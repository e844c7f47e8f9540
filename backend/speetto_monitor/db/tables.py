"""
Single source of truth for database tables that exist after migrations (001).

Use these names when writing raw SQL (e.g. DELETE in maintenance scripts).
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    "games",
    "game_readings",
    "recipients",
    "notification_logs",
)

# Tables holding scraped readings only; safe to clear without losing the audit log.
READING_TABLE_NAMES = (
    "game_readings",
    "games",
)
