"""
SQLite 어댑터 테스트

SQLiteAdapter 및 관련 함수 테스트.
"""

from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, create_connection
from core.config.loader import CurrencySeed
from core.ledger.schema import init_ledger_schema


class TestCreateConnection:
    """create_connection 테스트"""

    @pytest.mark.asyncio
    async def test_create_connection(self, tmp_path: Path) -> None:
        """연결 생성"""
        db_path = tmp_path / "test.db"

        conn = await create_connection(db_path)

        assert conn is not None

        # WAL 모드 확인
        cursor = await conn.execute("PRAGMA journal_mode")
        row = await cursor.fetchone()
        assert row[0].upper() == "WAL"

        await conn.close()

    @pytest.mark.asyncio
    async def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        """외래 키 제약 활성화"""
        conn = await create_connection(tmp_path / "fk.db")

        cursor = await conn.execute("PRAGMA foreign_keys")
        row = await cursor.fetchone()
        assert row[0] == 1

        await conn.close()

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """부모 디렉토리 생성"""
        db_path = tmp_path / "subdir" / "test.db"

        conn = await create_connection(db_path)

        assert db_path.parent.exists()

        await conn.close()

    @pytest.mark.asyncio
    async def test_readonly_rejects_writes(self, tmp_path: Path) -> None:
        """읽기 전용 연결은 쓰기 불가"""
        db_path = tmp_path / "ro.db"
        async with SQLiteAdapter(db_path) as writer:
            await writer.execute("CREATE TABLE t (id INTEGER)")
            await writer.commit()

        conn = await create_connection(db_path, readonly=True)

        with pytest.raises(aiosqlite.OperationalError):
            await conn.execute("INSERT INTO t (id) VALUES (1)")

        await conn.close()


class TestSQLiteAdapter:
    """SQLiteAdapter 테스트"""

    @pytest_asyncio.fixture
    async def adapter(self, tmp_path: Path) -> SQLiteAdapter:
        """어댑터 픽스처"""
        db_path = tmp_path / "test.db"
        adapter = SQLiteAdapter(db_path)
        await adapter.connect()
        yield adapter
        await adapter.close()

    @pytest.mark.asyncio
    async def test_connect_and_close(self, tmp_path: Path) -> None:
        """연결 및 종료"""
        db_path = tmp_path / "test.db"
        adapter = SQLiteAdapter(db_path)

        assert adapter.is_connected is False

        await adapter.connect()
        assert adapter.is_connected is True

        await adapter.close()
        assert adapter.is_connected is False

    @pytest.mark.asyncio
    async def test_not_connected(self, tmp_path: Path) -> None:
        """연결 전 실행 시 RuntimeError"""
        adapter = SQLiteAdapter(tmp_path / "test.db")

        with pytest.raises(RuntimeError):
            await adapter.execute("SELECT 1")

    @pytest.mark.asyncio
    async def test_execute(self, adapter: SQLiteAdapter) -> None:
        """SQL 실행"""
        await adapter.execute(
            "CREATE TABLE test (id INTEGER PRIMARY KEY, name TEXT)"
        )
        await adapter.execute(
            "INSERT INTO test (name) VALUES (?)",
            ("테스트",),
        )
        await adapter.commit()

        # 확인
        row = await adapter.fetchone("SELECT name FROM test WHERE id = 1")
        assert row[0] == "테스트"

    @pytest.mark.asyncio
    async def test_fetchall(self, adapter: SQLiteAdapter) -> None:
        """전체 조회"""
        await adapter.execute("CREATE TABLE items (value TEXT)")
        await adapter.executemany(
            "INSERT INTO items (value) VALUES (?)",
            [("A",), ("B",), ("C",)],
        )
        await adapter.commit()

        rows = await adapter.fetchall("SELECT value FROM items ORDER BY value")

        assert isinstance(rows, list)
        assert [row[0] for row in rows] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_transaction_commit(self, adapter: SQLiteAdapter) -> None:
        """트랜잭션 커밋"""
        await adapter.execute("CREATE TABLE tx_test (id INTEGER)")
        await adapter.commit()

        async with adapter.transaction():
            await adapter.execute("INSERT INTO tx_test (id) VALUES (1)")
            await adapter.execute("INSERT INTO tx_test (id) VALUES (2)")

        rows = await adapter.fetchall("SELECT id FROM tx_test")
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_transaction_rollback(self, adapter: SQLiteAdapter) -> None:
        """트랜잭션 롤백 (블록 안의 모든 쓰기 취소)"""
        await adapter.execute("CREATE TABLE tx_test2 (id INTEGER)")
        await adapter.commit()

        with pytest.raises(ValueError):
            async with adapter.transaction():
                await adapter.execute("INSERT INTO tx_test2 (id) VALUES (1)")
                await adapter.execute("INSERT INTO tx_test2 (id) VALUES (2)")
                raise ValueError("의도적 에러")

        rows = await adapter.fetchall("SELECT id FROM tx_test2")
        assert len(rows) == 0

    @pytest.mark.asyncio
    async def test_table_exists(self, adapter: SQLiteAdapter) -> None:
        """테이블 존재 확인"""
        assert await adapter.table_exists("nonexistent") is False

        await adapter.execute("CREATE TABLE existing (id INTEGER)")
        await adapter.commit()

        assert await adapter.table_exists("existing") is True

    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path: Path) -> None:
        """컨텍스트 매니저"""
        db_path = tmp_path / "ctx_test.db"

        async with SQLiteAdapter(db_path) as adapter:
            assert adapter.is_connected is True
            await adapter.execute("CREATE TABLE ctx (id INTEGER)")

        # 컨텍스트 종료 후 연결 해제 확인
        assert adapter.is_connected is False


class TestInitLedgerSchema:
    """init_ledger_schema 테스트"""

    SEEDS = (CurrencySeed("USD", 2, "$"), CurrencySeed("JPY", 0, "¥"))

    @pytest.mark.asyncio
    async def test_creates_tables(self, tmp_path: Path) -> None:
        """스키마 초기화 - 테이블 생성"""
        async with SQLiteAdapter(tmp_path / "schema_test.db") as adapter:
            await init_ledger_schema(adapter, self.SEEDS)

            for table in ("currency", "account", "ledger_transaction", "transaction_entry"):
                assert await adapter.table_exists(table) is True

    @pytest.mark.asyncio
    async def test_idempotent(self, tmp_path: Path) -> None:
        """여러 번 실행해도 통화 시드 중복 없음"""
        async with SQLiteAdapter(tmp_path / "idempotent_test.db") as adapter:
            await init_ledger_schema(adapter, self.SEEDS)
            await init_ledger_schema(adapter, self.SEEDS)

            rows = await adapter.fetchall("SELECT code, minor_units FROM currency ORDER BY code")

            assert rows == [("JPY", 0), ("USD", 2)]

    @pytest.mark.asyncio
    async def test_entry_amount_is_integer_column(self, tmp_path: Path) -> None:
        """transaction_entry 스키마 확인"""
        async with SQLiteAdapter(tmp_path / "entry_schema_test.db") as adapter:
            await init_ledger_schema(adapter, self.SEEDS)

            columns = {c["name"]: c for c in await adapter.get_table_info("transaction_entry")}

            assert columns["amount"]["type"] == "INTEGER"
            assert columns["amount"]["notnull"] is True
            assert "line_order" in columns
            assert "currency" in columns

    @pytest.mark.asyncio
    async def test_unknown_currency_rejected(self, tmp_path: Path) -> None:
        """currency 외래 키 제약조건 테스트"""
        async with SQLiteAdapter(tmp_path / "fk_test.db") as adapter:
            await init_ledger_schema(adapter, self.SEEDS)

            await adapter.execute(
                "INSERT INTO account (id, user_id, name, created_at) VALUES ('a1', 'u1', 'A', '2024')"
            )
            await adapter.execute(
                """
                INSERT INTO ledger_transaction (id, user_id, date, payee, notes, created_at, updated_at)
                VALUES ('t1', 'u1', '2024-01-01', 'P', NULL, '2024', '2024')
                """
            )
            await adapter.commit()

            with pytest.raises(aiosqlite.IntegrityError):
                await adapter.execute(
                    """
                    INSERT INTO transaction_entry (transaction_id, line_order, account_id, currency, amount)
                    VALUES ('t1', 0, 'a1', 'XYZ', 100)
                    """
                )
