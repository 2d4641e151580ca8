"""
계정 조회

계정 잔액, 월별 잔액, 기간별 누적 잔액, 계정 목록.
계정 필터는 항상 하위 계정까지 포함한다 ("Expenses:Food" → "Expenses:Food:*").
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from core.constants import LedgerDefaults
from core.ledger.currency import Currency, CurrencyAmount
from core.ledger.reports import DailyAmount, InstantBalances, cumulative_balances, truncate_date
from core.ledger.store import account_filter_params, account_filter_sql, storage_errors
from core.types import ReportInterval
from core.utils.timezone import (
    SYSTEM_CLOCK,
    first_of_month,
    one_year_before,
    to_db_timestamp,
)

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.interfaces import IClock

logger = logging.getLogger(__name__)


class AccountQueries:
    """계정 잔액/리포트 조회

    IAccountQueries 구현.

    Args:
        db: SQLite 어댑터
        clock: "오늘" 기준 (리포트 기간 계산용)
    """

    def __init__(self, db: SQLiteAdapter, clock: IClock | None = None):
        self.db = db
        self.clock = clock or SYSTEM_CLOCK

    async def get_account_balance(self, user_id: str, account: str) -> list[CurrencyAmount]:
        """계정(하위 포함) 통화별 현재 잔액

        Returns:
            통화 코드 순 CurrencyAmount 목록
        """
        with storage_errors("계정 잔액 조회"):
            rows = await self.db.fetchall(
                f"""
                SELECT c.code, c.minor_units, SUM(e.amount)
                FROM transaction_entry e
                    JOIN account a ON a.id = e.account_id
                    JOIN ledger_transaction t ON t.id = e.transaction_id
                    JOIN currency c ON c.code = e.currency
                WHERE t.user_id = ?
                    AND {account_filter_sql("a.name")}
                GROUP BY c.code, c.minor_units
                ORDER BY c.code
                """,
                (user_id, *account_filter_params(account)),
            )

        return [
            CurrencyAmount(Currency(code, minor_units), total)
            for code, minor_units, total in rows
        ]

    async def get_monthly_balance(
        self,
        user_id: str,
        account: str,
    ) -> dict[date, list[CurrencyAmount]]:
        """최근 1년 월별 통화별 합계

        1년 전 달의 1일부터. 항목이 있는 달만 포함.

        Returns:
            월(1일) → CurrencyAmount 목록 (월 오름차순, 통화 코드 순)
        """
        window_start = first_of_month(one_year_before(self.clock.today()))

        with storage_errors("월별 잔액 조회"):
            rows = await self.db.fetchall(
                f"""
                SELECT substr(t.date, 1, 7) || '-01' AS month,
                       c.code, c.minor_units, SUM(e.amount)
                FROM transaction_entry e
                    JOIN account a ON a.id = e.account_id
                    JOIN ledger_transaction t ON t.id = e.transaction_id
                    JOIN currency c ON c.code = e.currency
                WHERE t.user_id = ?
                    AND {account_filter_sql("a.name")}
                    AND t.date >= ?
                GROUP BY month, c.code, c.minor_units
                ORDER BY month, c.code
                """,
                (user_id, *account_filter_params(account), window_start.isoformat()),
            )

        result: dict[date, list[CurrencyAmount]] = {}
        for month, code, minor_units, total in rows:
            result.setdefault(date.fromisoformat(month), []).append(
                CurrencyAmount(Currency(code, minor_units), total)
            )
        return result

    async def periodic_cumulative_balance(
        self,
        user_id: str,
        account: str,
        interval: ReportInterval,
    ) -> dict[str, InstantBalances]:
        """기간별 누적 잔액 (최근 1년 구간)

        전체 이력의 거래일/통화별 합계를 읽은 뒤 reports.cumulative_balances로
        절사 + 누적합을 계산한다. 구간 이전 이력도 누적에 포함된다.

        Args:
            user_id: 소유자
            account: 계정 (하위 포함)
            interval: 일/주/월

        Returns:
            통화 코드 → InstantBalances
        """
        interval = ReportInterval(interval)
        window_start = truncate_date(one_year_before(self.clock.today()), interval)

        with storage_errors("기간별 잔액 조회"):
            rows = await self.db.fetchall(
                f"""
                SELECT t.date, c.code, c.minor_units, SUM(e.amount)
                FROM transaction_entry e
                    JOIN account a ON a.id = e.account_id
                    JOIN ledger_transaction t ON t.id = e.transaction_id
                    JOIN currency c ON c.code = e.currency
                WHERE t.user_id = ?
                    AND {account_filter_sql("a.name")}
                GROUP BY t.date, c.code, c.minor_units
                """,
                (user_id, *account_filter_params(account)),
            )

        logger.debug(
            f"기간별 잔액 리포트: account={account} interval={interval.value} "
            f"window_start={window_start} days={len(rows)}"
        )

        return cumulative_balances(
            (
                DailyAmount(date.fromisoformat(day), Currency(code, minor_units), total)
                for day, code, minor_units, total in rows
            ),
            interval,
            window_start,
        )

    async def list_accounts_by_popularity(
        self,
        user_id: str,
        search: str | None = None,
        limit: int = LedgerDefaults.POPULAR_ACCOUNTS_LIMIT,
    ) -> list[str]:
        """항목 수가 많은 순 계정명 (대소문자 무시 부분 검색)"""
        sql = """
            SELECT a.name
            FROM transaction_entry e
                JOIN account a ON a.id = e.account_id
            WHERE a.user_id = ?
        """
        params: list[object] = [user_id]

        if search:
            sql += " AND instr(lower(a.name), lower(?)) > 0"
            params.append(search)

        sql += """
            GROUP BY a.id, a.name
            ORDER BY COUNT(e.id) DESC, a.name
            LIMIT ?
        """
        params.append(limit)

        with storage_errors("계정 목록 조회"):
            rows = await self.db.fetchall(sql, tuple(params))

        return [row[0] for row in rows]

    async def list_active_accounts(self, user_id: str) -> list[str]:
        """최근 1년 내 생성된 거래에 쓰인 계정명 (이름순)"""
        since = to_db_timestamp(one_year_before(self.clock.now()))

        with storage_errors("활성 계정 조회"):
            rows = await self.db.fetchall(
                """
                SELECT DISTINCT a.name
                FROM transaction_entry e
                    JOIN account a ON a.id = e.account_id
                    JOIN ledger_transaction t ON t.id = e.transaction_id
                WHERE a.user_id = ?
                    AND t.created_at >= ?
                ORDER BY a.name
                """,
                (user_id, since),
            )

        return [row[0] for row in rows]
