# odds_service/sink.py
from datetime import datetime
from decimal import Decimal
from typing import List
from typing import Optional
from typing import Sequence

import aiosqlite
import structlog

from .core.exceptions import SinkError
from .models import OddsRecord

log = structlog.get_logger(__name__)

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

COLUMNS = (
    "observed_at",
    "race_name",
    "horse_number",
    "horse_name",
    "win_odds",
    "place_odds_min",
    "place_odds_max",
)


def _cell(value: Optional[Decimal]) -> str:
    return "" if value is None else str(value)


def build_rows(records: Sequence[OddsRecord], observed_at: datetime) -> List[List[str]]:
    """
    Flattens records into sink rows, one per record, in record order.
    Absent odds become empty cells.
    """
    timestamp = observed_at.strftime(TIMESTAMP_FORMAT)
    return [
        [
            timestamp,
            record.race_name,
            record.horse_number,
            record.horse_name,
            _cell(record.win_odds),
            _cell(record.place_odds_min),
            _cell(record.place_odds_max),
        ]
        for record in records
    ]


class SqliteOddsSink:
    """Append-only odds snapshot table, one row per runner per observation."""

    TABLE = "odds_snapshots"

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _ensure_table(self, db: aiosqlite.Connection):
        await db.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.TABLE} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                observed_at TEXT NOT NULL,
                race_name TEXT NOT NULL,
                horse_number TEXT NOT NULL,
                horse_name TEXT NOT NULL,
                win_odds TEXT NOT NULL,
                place_odds_min TEXT NOT NULL,
                place_odds_max TEXT NOT NULL
            )
            """
        )

    async def append_rows(self, rows: Sequence[Sequence[str]]) -> int:
        if not rows:
            return 0
        placeholders = ", ".join("?" for _ in COLUMNS)
        try:
            async with aiosqlite.connect(self.db_path) as db:
                await self._ensure_table(db)
                await db.executemany(
                    f"INSERT INTO {self.TABLE} ({', '.join(COLUMNS)}) VALUES ({placeholders})",
                    [tuple(row) for row in rows],
                )
                await db.commit()
        except aiosqlite.Error as e:
            log.error("Failed to persist odds rows", db_path=self.db_path, error=str(e))
            raise SinkError(f"Could not write {len(rows)} rows to {self.db_path}: {e}") from e

        log.info("Odds rows persisted", row_count=len(rows), db_path=self.db_path)
        return len(rows)
