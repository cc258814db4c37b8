"""
Schema versions for the saved_articles table.

The version lives in SQLite's `PRAGMA user_version`. Every upgrade is an
explicit entry in MIGRATIONS (from_version -> step); a step runs inside one
transaction together with the version bump, so a failed step leaves the
previous version intact.

Version history:
  1  mobile-app layout: _id INTEGER PK AUTOINCREMENT, title, description,
     content, url UNIQUE.
  2  the same table plus camel-case urlToImage / publishedAt columns.
     The mobile app stamped user_version itself, so databases copied from
     it arrive marked 1 or 2.
  3  current layout (models.SavedArticle): url is the primary key,
     image_url / published_at in snake case, published_at required.

The stamp alone is not trusted for tables older than v3: the layout is read
from the table's columns, and a stamp that disagrees with them is corrected
before any step runs.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlmodel import SQLModel

from .errors import SchemaMigrationError
from .logging_setup import get_logger
from .models import SavedArticle, format_timestamp

logger = get_logger("tech_news.migrations")

SCHEMA_VERSION = 3
TABLE = "saved_articles"

MigrationStep = Callable[[Connection, datetime], None]


def get_user_version(conn: Connection) -> int:
    return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def _set_user_version(conn: Connection, version: int) -> None:
    # PRAGMA does not take bound parameters
    conn.exec_driver_sql(f"PRAGMA user_version = {int(version)}")


def _table_columns(conn: Connection, table: str) -> List[str]:
    return [row[1] for row in conn.exec_driver_sql(f"PRAGMA table_info({table})")]


def _existing_tables(conn: Connection) -> List[str]:
    return [row[0] for row in conn.exec_driver_sql(
        "SELECT name FROM sqlite_master WHERE type = 'table'"
    )]


def _layout_version(columns: List[str]) -> int:
    """Schema version implied by the saved_articles columns."""
    cols = set(columns)
    if "_id" not in cols and "image_url" in cols and "published_at" in cols:
        return SCHEMA_VERSION
    if "publishedAt" in cols:
        return 2
    return 1


def _migrate_v1_to_v2(conn: Connection, now: datetime) -> None:
    cols = set(_table_columns(conn, TABLE))
    for name in ("urlToImage", "publishedAt"):
        if name not in cols:
            conn.exec_driver_sql(f"ALTER TABLE {TABLE} ADD COLUMN {name} TEXT")


def _migrate_v2_to_v3(conn: Connection, now: datetime) -> None:
    cols = set(_table_columns(conn, TABLE))
    image_col = "urlToImage" if "urlToImage" in cols else "NULL"
    published_col = "publishedAt" if "publishedAt" in cols else "NULL"
    order_col = "_id" if "_id" in cols else "rowid"

    rows = conn.execute(text(
        f"SELECT url, title, description, content, {image_col} AS image_url, "
        f"{published_col} AS published_at FROM {TABLE} ORDER BY {order_col}"
    )).mappings().all()

    conn.exec_driver_sql(f"DROP TABLE {TABLE}")
    SavedArticle.__table__.create(conn)

    backfill = format_timestamp(now)
    insert = SavedArticle.__table__.insert().prefix_with("OR REPLACE")
    copied = 0
    for row in rows:
        if not row["url"]:
            continue
        conn.execute(insert, {
            "url": row["url"],
            "title": row["title"] or "",
            "description": row["description"],
            "content": row["content"],
            "image_url": row["image_url"],
            "published_at": row["published_at"] or backfill,
        })
        copied += 1
    logger.info("MIGRATED_ROWS", extra={"from_version": 2, "rows": copied, "backfill": backfill})


MIGRATIONS: Dict[int, MigrationStep] = {
    1: _migrate_v1_to_v2,
    2: _migrate_v2_to_v3,
}


def migrate(engine: Engine, now: Optional[datetime] = None) -> int:
    """Upgrade the database behind `engine` to SCHEMA_VERSION and return it."""
    now = now or datetime.now(timezone.utc)

    with engine.begin() as conn:
        stamped = get_user_version(conn)
        if stamped > SCHEMA_VERSION:
            raise SchemaMigrationError(
                f"database schema v{stamped} is newer than supported v{SCHEMA_VERSION}",
                found_version=stamped, target_version=SCHEMA_VERSION,
            )
        if TABLE not in _existing_tables(conn):
            SQLModel.metadata.create_all(conn)
            _set_user_version(conn, SCHEMA_VERSION)
            logger.info("SCHEMA_CREATED", extra={"version": SCHEMA_VERSION})
            return SCHEMA_VERSION
        version = _layout_version(_table_columns(conn, TABLE))
        if version != stamped:
            logger.warning("SCHEMA_STAMP_CORRECTED", extra={"stamped": stamped, "layout": version})
            _set_user_version(conn, version)

    while version < SCHEMA_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise SchemaMigrationError(
                f"no migration registered from schema v{version}",
                found_version=version, target_version=SCHEMA_VERSION,
            )
        with engine.begin() as conn:
            step(conn, now)
            _set_user_version(conn, version + 1)
        logger.info("SCHEMA_MIGRATED", extra={"from_version": version, "to_version": version + 1})
        version += 1

    # Tables added without a data migration are created here.
    SQLModel.metadata.create_all(engine)
    return version
