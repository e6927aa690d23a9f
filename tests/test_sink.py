from datetime import datetime
from decimal import Decimal

import aiosqlite
import pytest

from odds_service.core.exceptions import SinkError
from odds_service.sink import COLUMNS
from odds_service.sink import SqliteOddsSink
from odds_service.sink import build_rows
from tests.utils import odds

OBSERVED_AT = datetime(2025, 12, 28, 15, 4, 5)


def test_build_rows_uses_sink_column_order():
    records = [odds("1", "キタサンブラック", "2.5", "1.2", "1.5", race="有馬記念")]

    rows = build_rows(records, OBSERVED_AT)

    assert rows == [["2025/12/28 15:04:05", "有馬記念", "1", "キタサンブラック", "2.5", "1.2", "1.5"]]


def test_build_rows_leaves_absent_odds_empty():
    rows = build_rows([odds("3", "未定馬", None)], OBSERVED_AT)

    assert rows[0][4:] == ["", "", ""]


def test_build_rows_preserves_record_order():
    records = [odds(n, f"馬{n}", "5.0") for n in ("9", "2", "14")]

    rows = build_rows(records, OBSERVED_AT)

    assert [row[2] for row in rows] == ["9", "2", "14"]


@pytest.mark.asyncio
async def test_append_rows_persists_to_sqlite(tmp_path):
    sink = SqliteOddsSink(str(tmp_path / "odds.db"))
    rows = build_rows(
        [odds("1", "馬A", "2.5", "1.2", "1.5"), odds("2", "馬B", None)],
        OBSERVED_AT,
    )

    saved = await sink.append_rows(rows)
    saved_again = await sink.append_rows(rows[:1])

    assert saved == 2
    assert saved_again == 1
    async with aiosqlite.connect(sink.db_path) as db:
        cursor = await db.execute(f"SELECT {', '.join(COLUMNS)} FROM {sink.TABLE} ORDER BY id")
        stored = await cursor.fetchall()
    assert [tuple(r) for r in stored] == [tuple(rows[0]), tuple(rows[1]), tuple(rows[0])]
    assert Decimal(stored[0][4]) == Decimal("2.5")


@pytest.mark.asyncio
async def test_append_no_rows_is_a_no_op(tmp_path):
    db_path = tmp_path / "odds.db"
    sink = SqliteOddsSink(str(db_path))

    assert await sink.append_rows([]) == 0
    assert not db_path.exists()


@pytest.mark.asyncio
async def test_unwritable_database_raises_sink_error(tmp_path):
    sink = SqliteOddsSink(str(tmp_path))  # a directory, not a database file

    with pytest.raises(SinkError):
        await sink.append_rows(build_rows([odds("1", "馬A", "2.5")], OBSERVED_AT))
