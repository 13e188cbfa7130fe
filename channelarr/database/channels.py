"""Database operations for channels.

CRUD operations for the channels and channel_programs tables.
Every write to a channel or its program list bumps `revision`, which the
program catalog uses as its cache change token.
"""

import json
import logging
import uuid
from datetime import datetime
from sqlite3 import Connection, Row

from channelarr.core import UNIX_EPOCH, Channel, Program, ScheduleMode
from channelarr.utilities.tz import to_utc

logger = logging.getLogger(__name__)

# Columns a caller may change through update_channel()
UPDATABLE_FIELDS = {
    "name": "name",
    "number": "number",
    "group": "channel_group",
    "mode": "mode",
    "library_ids": "library_ids",
    "enabled": "enabled",
    "image_url": "image_url",
    "anchor": "anchor",
}

# Fields a partial update may set to NULL
NULLABLE_FIELDS = {"image_url"}


def _parse_library_ids(library_ids_str: str | None) -> tuple[str, ...]:
    """Parse library_ids JSON string to tuple."""
    if not library_ids_str:
        return ()
    try:
        return tuple(json.loads(library_ids_str))
    except (json.JSONDecodeError, TypeError):
        return ()


def _parse_anchor(anchor_str: str | None) -> datetime:
    if not anchor_str:
        return UNIX_EPOCH
    try:
        return to_utc(datetime.fromisoformat(anchor_str))
    except ValueError:
        logger.warning("[DB] Invalid channel anchor %r, using Unix epoch", anchor_str)
        return UNIX_EPOCH


def _to_column(field: str, value):
    """Convert a Channel field value to its stored representation."""
    if field == "mode":
        return value.value if isinstance(value, ScheduleMode) else ScheduleMode(value).value
    if field == "library_ids":
        return json.dumps(list(value))
    if field == "anchor":
        return to_utc(value).isoformat()
    if field == "enabled":
        return 1 if value else 0
    return value


def _row_to_program(row: Row) -> Program:
    return Program(item_id=row["item_id"], name=row["name"], runtime_ticks=row["runtime_ticks"])


def _row_to_channel(row: Row, programs: list[Program]) -> Channel:
    """Convert database row plus its programs to a Channel."""
    return Channel(
        id=row["id"],
        name=row["name"],
        number=row["number"],
        group=row["channel_group"],
        mode=ScheduleMode(row["mode"]),
        programs=tuple(programs),
        library_ids=_parse_library_ids(row["library_ids"]),
        enabled=bool(row["enabled"]),
        image_url=row["image_url"],
        anchor=_parse_anchor(row["anchor"]),
        revision=row["revision"],
    )


def _bump_revision(conn: Connection, channel_id: str) -> None:
    conn.execute(
        """UPDATE channels SET revision = revision + 1, updated_at = CURRENT_TIMESTAMP
           WHERE id = ?""",
        (channel_id,),
    )


def channel_exists(conn: Connection, channel_id: str) -> bool:
    cursor = conn.execute("SELECT 1 FROM channels WHERE id = ?", (channel_id,))
    return cursor.fetchone() is not None


def get_programs(conn: Connection, channel_id: str) -> list[Program]:
    """Get a channel's explicit program list in position order."""
    cursor = conn.execute(
        """SELECT item_id, name, runtime_ticks FROM channel_programs
           WHERE channel_id = ? ORDER BY position, id""",
        (channel_id,),
    )
    return [_row_to_program(row) for row in cursor.fetchall()]


def list_channels(conn: Connection, enabled_only: bool = False) -> list[Channel]:
    """List all channels ordered by number then name.

    Args:
        conn: Database connection
        enabled_only: If True, only return enabled channels

    Returns:
        List of Channel values with their programs
    """
    query = "SELECT * FROM channels"
    if enabled_only:
        query += " WHERE enabled = 1"
    query += " ORDER BY CAST(number AS REAL), number, name"
    rows = conn.execute(query).fetchall()
    return [_row_to_channel(row, get_programs(conn, row["id"])) for row in rows]


def get_channel(conn: Connection, channel_id: str) -> Channel | None:
    """Get a channel by ID.

    Returns:
        Channel, or None if not found
    """
    cursor = conn.execute("SELECT * FROM channels WHERE id = ?", (channel_id,))
    row = cursor.fetchone()
    if not row:
        return None
    return _row_to_channel(row, get_programs(conn, channel_id))


def count_channels(conn: Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM channels").fetchone()[0]


def create_channel(
    conn: Connection,
    name: str,
    number: str | None = None,
    group: str | None = None,
    mode: ScheduleMode = ScheduleMode.SHUFFLE,
    library_ids: list[str] | None = None,
    image_url: str | None = None,
    anchor: datetime | None = None,
    channel_id: str | None = None,
) -> Channel:
    """Create a new channel.

    Args:
        conn: Database connection
        name: Display name
        number: Guide number (default: next after the current channel count)
        group: Guide group (default: 'Virtual')
        mode: Scheduling mode
        library_ids: Libraries to pull from when no explicit programs are set
        image_url: Channel logo URL
        anchor: Cycle origin (default: Unix epoch)
        channel_id: Explicit ID (default: random hex UUID)

    Returns:
        Created Channel
    """
    channel_id = channel_id or uuid.uuid4().hex
    if number is None:
        number = str(count_channels(conn) + 1)

    conn.execute(
        """
        INSERT INTO channels (
            id, name, number, channel_group, mode, library_ids, enabled, image_url, anchor
        ) VALUES (?, ?, ?, ?, ?, ?, 1, ?, ?)
        """,
        (
            channel_id,
            name,
            number,
            group or "Virtual",
            _to_column("mode", mode),
            _to_column("library_ids", library_ids or []),
            image_url,
            _to_column("anchor", anchor or UNIX_EPOCH),
        ),
    )
    logger.info("[DB] Created channel '%s' (%s)", name, channel_id)
    return get_channel(conn, channel_id)


def update_channel(conn: Connection, channel_id: str, updates: dict) -> Channel | None:
    """Update channel fields.

    Args:
        conn: Database connection
        channel_id: Channel ID
        updates: Field name -> new value (keys of UPDATABLE_FIELDS)

    Returns:
        Updated Channel, or None if not found
    """
    columns = {
        UPDATABLE_FIELDS[field]: _to_column(field, value)
        for field, value in updates.items()
        if field in UPDATABLE_FIELDS
    }
    if not channel_exists(conn, channel_id):
        return None
    if columns:
        set_clause = ", ".join(f"{column} = ?" for column in columns)
        conn.execute(
            f"UPDATE channels SET {set_clause} WHERE id = ?",
            [*columns.values(), channel_id],
        )
        _bump_revision(conn, channel_id)
    return get_channel(conn, channel_id)


def delete_channel(conn: Connection, channel_id: str) -> bool:
    """Delete a channel and its programs.

    Returns:
        True if a channel was deleted
    """
    cursor = conn.execute("DELETE FROM channels WHERE id = ?", (channel_id,))
    if cursor.rowcount:
        logger.info("[DB] Deleted channel %s", channel_id)
    return cursor.rowcount > 0


def add_programs(conn: Connection, channel_id: str, programs: list[Program]) -> list[Program]:
    """Append programs to the end of a channel's program list.

    Returns:
        The appended programs
    """
    cursor = conn.execute(
        "SELECT COALESCE(MAX(position), -1) FROM channel_programs WHERE channel_id = ?",
        (channel_id,),
    )
    next_position = cursor.fetchone()[0] + 1

    conn.executemany(
        """INSERT INTO channel_programs (channel_id, position, item_id, name, runtime_ticks)
           VALUES (?, ?, ?, ?, ?)""",
        [
            (channel_id, next_position + offset, p.item_id, p.name, p.runtime_ticks)
            for offset, p in enumerate(programs)
        ],
    )
    _bump_revision(conn, channel_id)
    return programs


def set_programs(conn: Connection, channel_id: str, programs: list[Program]) -> list[Program]:
    """Replace a channel's whole program list (reorder / bulk update)."""
    conn.execute("DELETE FROM channel_programs WHERE channel_id = ?", (channel_id,))
    conn.executemany(
        """INSERT INTO channel_programs (channel_id, position, item_id, name, runtime_ticks)
           VALUES (?, ?, ?, ?, ?)""",
        [
            (channel_id, position, p.item_id, p.name, p.runtime_ticks)
            for position, p in enumerate(programs)
        ],
    )
    _bump_revision(conn, channel_id)
    return get_programs(conn, channel_id)


def remove_program(conn: Connection, channel_id: str, item_id: str) -> int:
    """Remove every occurrence of an item from a channel.

    Returns:
        Number of program entries removed
    """
    cursor = conn.execute(
        "DELETE FROM channel_programs WHERE channel_id = ? AND item_id = ?",
        (channel_id, item_id),
    )
    if cursor.rowcount:
        _bump_revision(conn, channel_id)
    return cursor.rowcount
