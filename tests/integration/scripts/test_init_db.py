"""
scripts/init_db.py 테스트
"""

from pathlib import Path

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from scripts.init_db import REQUIRED_TABLES, init_database, verify_schema


class TestInitDatabase:
    """init_database 테스트"""

    @pytest.mark.asyncio
    async def test_creates_schema_and_seeds(self, temp_settings_file: Path, temp_dir: Path) -> None:
        """settings.yaml의 통화가 시드됨"""
        db_path = temp_dir / "data" / "ledger.db"

        result = await init_database(temp_settings_file, db_path)

        assert result == db_path
        async with SQLiteAdapter(db_path) as db:
            for table in REQUIRED_TABLES:
                assert await db.table_exists(table)
            rows = await db.fetchall("SELECT code, minor_units, symbol FROM currency ORDER BY code")
            assert rows == [("JPY", 0, ""), ("USD", 2, "$")]

    @pytest.mark.asyncio
    async def test_rerun_is_safe(self, temp_settings_file: Path, temp_dir: Path) -> None:
        db_path = temp_dir / "ledger.db"

        await init_database(temp_settings_file, db_path)
        await init_database(temp_settings_file, db_path)

        async with SQLiteAdapter(db_path) as db:
            row = await db.fetchone("SELECT COUNT(*) FROM currency")
            assert row[0] == 2


class TestVerifySchema:
    """verify_schema 테스트"""

    @pytest.mark.asyncio
    async def test_missing_tables(self, temp_dir: Path) -> None:
        async with SQLiteAdapter(temp_dir / "empty.db") as db:
            assert await verify_schema(db) is False

    @pytest.mark.asyncio
    async def test_initialized(self, db: SQLiteAdapter) -> None:
        assert await verify_schema(db) is True
