"""
원장 저장소

거래 저장/수정/삭제/조회와 keyset 페이지네이션, 통화 조회.
모든 쓰기는 SQLiteAdapter.transaction() 하나의 단위로 실행되어
항목이 일부만 저장된 거래는 관찰되지 않는다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from core.constants import LedgerDefaults
from core.ledger.currency import Currency, CurrencyAmount
from core.ledger.errors import DatabaseError, TransactionNotFound
from core.ledger.transaction import (
    NewTransaction,
    Transaction,
    TransactionCollection,
    TransactionEntry,
    TransactionQuery,
)
from core.utils.timezone import SYSTEM_CLOCK, from_db_timestamp, to_db_timestamp

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.interfaces import IClock

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """드라이버 예외를 DatabaseError로 변환

    장애는 여기서 한 번만 ERROR로 기록한다.
    """
    try:
        yield
    except aiosqlite.Error as e:
        logger.error(f"{action} 실패: {e}", exc_info=True)
        raise DatabaseError(f"{action} 실패") from e


def account_filter_sql(column: str) -> str:
    """계정 + 하위 계정 매칭 조건

    파라미터 순서: (account, len(prefix), prefix), prefix = account + ":".
    LIKE는 대소문자를 구분하지 않고 %, _ 를 와일드카드로 해석하므로 substr 비교 사용.
    """
    return f"({column} = ? OR substr({column}, 1, ?) = ?)"


def account_filter_params(account: str) -> tuple[Any, ...]:
    prefix = f"{account}:"
    return (account, len(prefix), prefix)


class LedgerStore:
    """원장 저장소

    ITransactionRepo + ICurrencyLookup 구현.

    Args:
        db: SQLite 어댑터
        clock: created_at/updated_at 발급용 시계
        page_size: 거래 목록 페이지 크기
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        clock: IClock | None = None,
        page_size: int = LedgerDefaults.PAGE_SIZE,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.db = db
        self.clock = clock or SYSTEM_CLOCK
        self.page_size = page_size

    # -------------------------------------------------------------------------
    # 통화
    # -------------------------------------------------------------------------

    async def by_codes(self, codes: set[str]) -> dict[str, Currency]:
        """통화 코드로 통화 조회 (없는 코드는 결과에서 빠짐)"""
        if not codes:
            return {}

        ordered = sorted(codes)
        placeholders = ", ".join("?" for _ in ordered)
        with storage_errors("통화 조회"):
            rows = await self.db.fetchall(
                f"SELECT code, minor_units FROM currency WHERE code IN ({placeholders})",
                tuple(ordered),
            )

        return {row[0]: Currency(row[0], row[1]) for row in rows}

    async def list_currencies(self) -> list[dict[str, Any]]:
        """등록된 통화 목록 (코드 순)"""
        with storage_errors("통화 목록 조회"):
            rows = await self.db.fetchall(
                "SELECT code, symbol, minor_units FROM currency ORDER BY code"
            )

        return [
            {"code": row[0], "symbol": row[1], "minor_units": row[2]}
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # 쓰기
    # -------------------------------------------------------------------------

    async def persist(self, new_transaction: NewTransaction) -> Transaction:
        """새 거래 저장

        Args:
            new_transaction: build_transaction 결과

        Returns:
            id/타임스탬프가 발급된 저장 결과
        """
        transaction_id = uuid4().hex
        now = self.clock.now()
        now_str = to_db_timestamp(now)

        with storage_errors("거래 저장"):
            async with self.db.transaction():
                await self.db.execute(
                    """
                    INSERT INTO ledger_transaction (
                        id, user_id, date, payee, notes, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        transaction_id,
                        new_transaction.user_id,
                        new_transaction.date.isoformat(),
                        new_transaction.payee,
                        new_transaction.notes,
                        now_str,
                        now_str,
                    ),
                )
                await self._insert_entries(
                    transaction_id,
                    new_transaction.user_id,
                    new_transaction.entries,
                    now_str,
                )

        logger.debug(f"거래 저장: {transaction_id} ({len(new_transaction.entries)} entries)")

        return Transaction(
            id=transaction_id,
            user_id=new_transaction.user_id,
            date=new_transaction.date,
            payee=new_transaction.payee,
            notes=new_transaction.notes,
            entries=new_transaction.entries,
            created_at=from_db_timestamp(now_str),
            updated_at=from_db_timestamp(now_str),
        )

    async def update(self, transaction_id: str, new_transaction: NewTransaction) -> Transaction:
        """거래 전체 교체 (항목 delete-then-insert)

        Args:
            transaction_id: 대상 거래 ID
            new_transaction: 교체할 내용 (user_id가 소유자 조건)

        Returns:
            갱신된 거래

        Raises:
            TransactionNotFound: 대상이 없거나 소유자가 다름 (아무것도 커밋되지 않음)
            DatabaseError: 저장소 장애
        """
        now_str = to_db_timestamp(self.clock.now())

        with storage_errors("거래 수정"):
            async with self.db.transaction():
                cursor = await self.db.execute(
                    """
                    UPDATE ledger_transaction
                    SET date = ?, payee = ?, notes = ?, updated_at = ?
                    WHERE id = ? AND user_id = ?
                    """,
                    (
                        new_transaction.date.isoformat(),
                        new_transaction.payee,
                        new_transaction.notes,
                        now_str,
                        transaction_id,
                        new_transaction.user_id,
                    ),
                )
                if cursor.rowcount == 0:
                    logger.info(f"수정 대상 거래 없음: {transaction_id}")
                    raise TransactionNotFound(transaction_id)

                await self.db.execute(
                    "DELETE FROM transaction_entry WHERE transaction_id = ?",
                    (transaction_id,),
                )
                await self._insert_entries(
                    transaction_id,
                    new_transaction.user_id,
                    new_transaction.entries,
                    now_str,
                )

                row = await self.db.fetchone(
                    "SELECT created_at FROM ledger_transaction WHERE id = ?",
                    (transaction_id,),
                )

        logger.debug(f"거래 수정: {transaction_id}")

        return Transaction(
            id=transaction_id,
            user_id=new_transaction.user_id,
            date=new_transaction.date,
            payee=new_transaction.payee,
            notes=new_transaction.notes,
            entries=new_transaction.entries,
            created_at=from_db_timestamp(row[0]),
            updated_at=from_db_timestamp(now_str),
        )

    async def delete(self, transaction_id: str, user_id: str) -> None:
        """거래 삭제 (멱등: 없는 거래 삭제도 성공)"""
        with storage_errors("거래 삭제"):
            async with self.db.transaction():
                await self.db.execute(
                    """
                    DELETE FROM transaction_entry
                    WHERE transaction_id IN (
                        SELECT id FROM ledger_transaction WHERE id = ? AND user_id = ?
                    )
                    """,
                    (transaction_id, user_id),
                )
                cursor = await self.db.execute(
                    "DELETE FROM ledger_transaction WHERE id = ? AND user_id = ?",
                    (transaction_id, user_id),
                )

        logger.info(f"거래 삭제: {transaction_id} (rows_affected={cursor.rowcount})")

    async def _account_id(self, user_id: str, name: str, now_str: str) -> str:
        """계정 조회, 없으면 생성 (user_id, name 단위)"""
        await self.db.execute(
            """
            INSERT OR IGNORE INTO account (id, user_id, name, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (uuid4().hex, user_id, name, now_str),
        )
        row = await self.db.fetchone(
            "SELECT id FROM account WHERE user_id = ? AND name = ?",
            (user_id, name),
        )
        return row[0]

    async def _insert_entries(
        self,
        transaction_id: str,
        user_id: str,
        entries: tuple[TransactionEntry, ...],
        now_str: str,
    ) -> None:
        account_ids: dict[str, str] = {}
        for entry in entries:
            if entry.account not in account_ids:
                account_ids[entry.account] = await self._account_id(
                    user_id, entry.account, now_str
                )

        await self.db.executemany(
            """
            INSERT INTO transaction_entry (
                transaction_id, line_order, account_id, currency, amount
            ) VALUES (?, ?, ?, ?, ?)
            """,
            [
                (
                    transaction_id,
                    order,
                    account_ids[entry.account],
                    entry.amount.currency.code,
                    entry.amount.value,
                )
                for order, entry in enumerate(entries)
            ],
        )

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get(self, transaction_id: str, user_id: str) -> Transaction | None:
        """거래 단건 조회 (소유자가 다르면 None)"""
        with storage_errors("거래 조회"):
            row = await self.db.fetchone(
                """
                SELECT id, user_id, date, payee, notes, created_at, updated_at
                FROM ledger_transaction
                WHERE id = ? AND user_id = ?
                """,
                (transaction_id, user_id),
            )
            if row is None:
                return None

            entries = await self._fetch_entries([row[0]])

        return self._row_to_transaction(row, entries.get(row[0], []))

    async def list(self, query: TransactionQuery) -> TransactionCollection:
        """거래 목록 조회 (keyset 페이지네이션)

        정렬: date DESC, created_at DESC.
        page_size + 1개를 조회하여 다음 페이지 존재 여부를 판단한다.

        Args:
            query: user_id, account 필터, after 커서

        Returns:
            items + next 커서 (마지막 페이지면 None)
        """
        sql = """
            SELECT t.id, t.user_id, t.date, t.payee, t.notes, t.created_at, t.updated_at
            FROM ledger_transaction t
            WHERE t.user_id = ?
        """
        params: list[Any] = [query.user_id]

        if query.account is not None:
            sql += f"""
            AND EXISTS (
                SELECT 1
                FROM transaction_entry e
                    JOIN account a ON a.id = e.account_id
                WHERE e.transaction_id = t.id
                    AND {account_filter_sql("a.name")}
            )
            """
            params.extend(account_filter_params(query.account))

        if query.after is not None:
            after_date = query.after.after_date.isoformat()
            sql += " AND (t.date < ? OR (t.date = ? AND t.created_at < ?))"
            params.extend([
                after_date,
                after_date,
                to_db_timestamp(query.after.after_created_at),
            ])

        sql += " ORDER BY t.date DESC, t.created_at DESC LIMIT ?"
        params.append(self.page_size + 1)

        with storage_errors("거래 목록 조회"):
            rows = await self.db.fetchall(sql, tuple(params))

            has_more = len(rows) > self.page_size
            rows = rows[: self.page_size]

            entries = await self._fetch_entries([row[0] for row in rows])

        items = [self._row_to_transaction(row, entries.get(row[0], [])) for row in rows]
        next_cursor = items[-1].cursor if has_more and items else None

        logger.debug(
            f"거래 목록 조회: user={query.user_id} account={query.account} "
            f"items={len(items)} has_more={has_more}"
        )

        return TransactionCollection(items=items, next=next_cursor)

    async def _fetch_entries(
        self,
        transaction_ids: list[str],
    ) -> dict[str, list[TransactionEntry]]:
        """여러 거래의 항목을 한 번에 조회하여 거래별로 묶는다 (line_order 유지)"""
        if not transaction_ids:
            return {}

        placeholders = ", ".join("?" for _ in transaction_ids)
        rows = await self.db.fetchall(
            f"""
            SELECT e.transaction_id, a.name, c.code, c.minor_units, e.amount
            FROM transaction_entry e
                JOIN account a ON a.id = e.account_id
                JOIN currency c ON c.code = e.currency
            WHERE e.transaction_id IN ({placeholders})
            ORDER BY e.transaction_id, e.line_order
            """,
            tuple(transaction_ids),
        )

        grouped: dict[str, list[TransactionEntry]] = {}
        for transaction_id, account, code, minor_units, amount in rows:
            grouped.setdefault(transaction_id, []).append(
                TransactionEntry(
                    account=account,
                    amount=CurrencyAmount(Currency(code, minor_units), amount),
                )
            )
        return grouped

    @staticmethod
    def _row_to_transaction(
        row: tuple[Any, ...],
        entries: list[TransactionEntry],
    ) -> Transaction:
        return Transaction(
            id=row[0],
            user_id=row[1],
            date=date.fromisoformat(row[2]),
            payee=row[3],
            notes=row[4],
            entries=tuple(entries),
            created_at=from_db_timestamp(row[5]),
            updated_at=from_db_timestamp(row[6]),
        )
