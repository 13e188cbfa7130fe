"""Runtime settings helpers.

Helper functions that read and write the singleton settings row.
"""

from sqlite3 import Connection

DEFAULT_SCHEDULE_SETTINGS = {
    "guide_days": 3,
    "preview_hours": 24,
    "enrichment_timeout_seconds": 10.0,
    "catalog_cache_ttl_seconds": 300,
}


def get_schedule_settings(conn: Connection) -> dict:
    """Get schedule generation settings.

    Args:
        conn: Database connection

    Returns:
        Dict with guide_days, preview_hours, enrichment_timeout_seconds,
        catalog_cache_ttl_seconds
    """
    cursor = conn.execute(
        """SELECT guide_days, preview_hours, enrichment_timeout_seconds,
                  catalog_cache_ttl_seconds
           FROM settings WHERE id = 1"""
    )
    row = cursor.fetchone()
    if not row:
        return dict(DEFAULT_SCHEDULE_SETTINGS)
    return {
        "guide_days": row["guide_days"] or DEFAULT_SCHEDULE_SETTINGS["guide_days"],
        "preview_hours": row["preview_hours"] or DEFAULT_SCHEDULE_SETTINGS["preview_hours"],
        "enrichment_timeout_seconds": (
            row["enrichment_timeout_seconds"]
            if row["enrichment_timeout_seconds"] is not None
            else DEFAULT_SCHEDULE_SETTINGS["enrichment_timeout_seconds"]
        ),
        "catalog_cache_ttl_seconds": (
            row["catalog_cache_ttl_seconds"]
            if row["catalog_cache_ttl_seconds"] is not None
            else DEFAULT_SCHEDULE_SETTINGS["catalog_cache_ttl_seconds"]
        ),
    }


def update_schedule_settings(conn: Connection, updates: dict) -> dict:
    """Update schedule settings. Unknown keys are ignored.

    Returns:
        Settings after the update
    """
    updates = {k: v for k, v in updates.items() if k in DEFAULT_SCHEDULE_SETTINGS}
    if updates:
        set_clause = ", ".join(f"{k} = ?" for k in updates)
        conn.execute(f"UPDATE settings SET {set_clause} WHERE id = 1", list(updates.values()))
    return get_schedule_settings(conn)
