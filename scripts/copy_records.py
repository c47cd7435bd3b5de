"""
Copie des enregistrements gasoil / Diesel record copy between stores.

Copie la table diesel_records d'une base source (ex : l'ancien fichier data.db)
vers DATABASE_URL (SQLite ou PostgreSQL), en conservant les ids.
Copies diesel_records from a source database (e.g. the legacy data.db file)
into DATABASE_URL (SQLite or PostgreSQL), keeping ids.

Usage:
    SOURCE_URL=sqlite+aiosqlite:///./data.db \
    DATABASE_URL=postgresql+asyncpg://diesel:password@db:5432/diesel \
    python -m scripts.copy_records
"""

import asyncio
import logging
import os
import sys
from datetime import date, datetime
from typing import Any

from sqlalchemy import insert, text

from diesel_log.database import RecordStore
from diesel_log.models.diesel_record import DieselRecord

logger = logging.getLogger("diesel_log.copy")

BATCH_SIZE = 500
COLUMNS = ["id", "lorry_number", "record_date", "price", "liters", "created_at"]


def convert_row(row: dict[str, Any]) -> dict[str, Any]:
    """Convertir les dates texte de l'ancien schema / Convert legacy text dates and timestamps."""
    converted = dict(row)
    if isinstance(converted.get("record_date"), str):
        converted["record_date"] = date.fromisoformat(converted["record_date"][:10])
    if isinstance(converted.get("created_at"), str):
        converted["created_at"] = datetime.fromisoformat(converted["created_at"])
    if converted.get("created_at") is None:
        converted.pop("created_at", None)
    return converted


async def copy_records(source_url: str, target_url: str) -> int:
    """Copier toutes les lignes / Copy every row, returns the number copied."""
    source = RecordStore(source_url)
    target = RecordStore(target_url)
    logger.info("Source: %s", source.display_url)
    logger.info("Target: %s", target.display_url)

    await target.init()
    copied = 0
    try:
        # Lecture brute : l'ancien schema stocke les dates en texte /
        # Raw read: the legacy schema stores dates as text
        async with source.engine.connect() as conn:
            col_list = ", ".join(COLUMNS)
            result = await conn.execute(text(f"SELECT {col_list} FROM diesel_records ORDER BY id"))
            rows = [convert_row(dict(r._mapping)) for r in result.fetchall()]

        for i in range(0, len(rows), BATCH_SIZE):
            batch = rows[i:i + BATCH_SIZE]
            async with target.session() as session:
                for row in batch:
                    await session.execute(insert(DieselRecord).values(**row))
            copied += len(batch)
            logger.info("Copied %d/%d rows", copied, len(rows))

        # Remettre la sequence PostgreSQL a niveau / Reset the PostgreSQL id sequence
        if copied and not target.is_sqlite:
            async with target.session() as session:
                await session.execute(text(
                    "SELECT setval(pg_get_serial_sequence('diesel_records', 'id'), "
                    "COALESCE((SELECT MAX(id) FROM diesel_records), 0) + 1, false)"
                ))
    finally:
        await source.dispose()
        await target.dispose()
    return copied


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    source_url = os.getenv("SOURCE_URL", "sqlite+aiosqlite:///./data.db")
    target_url = os.getenv("DATABASE_URL")
    if not target_url:
        logger.error("DATABASE_URL must point to the target database")
        sys.exit(1)
    if source_url == target_url:
        logger.error("SOURCE_URL and DATABASE_URL must differ")
        sys.exit(1)
    total = asyncio.run(copy_records(source_url, target_url))
    logger.info("Done: %d rows copied", total)


if __name__ == "__main__":
    main()
