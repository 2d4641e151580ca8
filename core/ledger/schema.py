"""
원장 스키마 초기화

Web 시작 시 / init_db 스크립트에서 호출되어 원장 테이블과 인덱스를 생성.
CREATE IF NOT EXISTS / INSERT OR IGNORE 패턴으로 여러 번 호출해도 안전하다.

날짜는 'YYYY-MM-DD', 타임스탬프는 마이크로초 고정폭 UTC ISO 문자열로 저장하여
문자열 정렬이 시간 정렬과 같도록 한다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.config.loader import CurrencySeed

logger = logging.getLogger(__name__)


async def init_ledger_schema(
    db: SQLiteAdapter,
    currencies: Iterable[CurrencySeed] = (),
) -> None:
    """원장 스키마 초기화 (테이블 + 인덱스 + 통화 시드)

    Args:
        db: 연결된 SQLiteAdapter
        currencies: currency 테이블에 넣을 초기 통화 목록
    """
    async with db.transaction():
        await _create_ledger_tables(db)
        await _create_ledger_indexes(db)
        await _insert_currencies(db, currencies)
    logger.info("원장 스키마 초기화 완료")


async def _create_ledger_tables(db: SQLiteAdapter) -> None:
    """원장 테이블 생성"""

    await db.execute("""
        CREATE TABLE IF NOT EXISTS currency (
            code             TEXT PRIMARY KEY,
            symbol           TEXT NOT NULL DEFAULT '',
            minor_units      INTEGER NOT NULL CHECK (minor_units >= 0)
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            id               TEXT PRIMARY KEY,
            user_id          TEXT NOT NULL,
            name             TEXT NOT NULL,
            created_at       TEXT NOT NULL,
            UNIQUE(user_id, name)
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_transaction (
            id               TEXT PRIMARY KEY,
            user_id          TEXT NOT NULL,
            date             TEXT NOT NULL,
            payee            TEXT NOT NULL,
            notes            TEXT,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS transaction_entry (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            transaction_id   TEXT NOT NULL
                REFERENCES ledger_transaction(id) ON DELETE CASCADE,
            line_order       INTEGER NOT NULL,
            account_id       TEXT NOT NULL REFERENCES account(id),
            currency         TEXT NOT NULL REFERENCES currency(code),
            amount           INTEGER NOT NULL,
            UNIQUE(transaction_id, line_order)
        )
    """)


async def _create_ledger_indexes(db: SQLiteAdapter) -> None:
    """원장 인덱스 생성"""

    # 페이지네이션 정렬 키
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_ledger_transaction_user_date
        ON ledger_transaction(user_id, date DESC, created_at DESC)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transaction_entry_transaction
        ON transaction_entry(transaction_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transaction_entry_account
        ON transaction_entry(account_id)
    """)


async def _insert_currencies(db: SQLiteAdapter, currencies: Iterable[CurrencySeed]) -> None:
    """초기 통화 삽입 (이미 있으면 유지)"""
    rows = [(c.code, c.symbol, c.minor_units) for c in currencies]
    if not rows:
        return

    await db.executemany(
        """
        INSERT OR IGNORE INTO currency (code, symbol, minor_units)
        VALUES (?, ?, ?)
        """,
        rows,
    )
    logger.debug(f"통화 시드 {len(rows)}개 확인")
