"""
계정 서비스

계정 목록, 잔액, 월별/기간별 리포트, 등록 통화 조회
"""

import datetime

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.store import LedgerStore
from core.types import ReportInterval
from web.models.responses import (
    AmountResponse,
    CurrencyInfoResponse,
    CurrencyInstantBalancesResponse,
)
from web.services.transaction_service import build_ledger_service


class AccountService:
    """계정 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.ledger = build_ledger_service(db)

    async def list_accounts(self, user_id: str, search: str | None = None) -> list[str]:
        """인기순 계정명 (최대 10개)"""
        return await self.ledger.list_accounts(user_id, search or None)

    async def list_active_accounts(self, user_id: str) -> list[str]:
        return await self.ledger.list_active_accounts(user_id)

    async def get_balance(self, user_id: str, account: str) -> list[AmountResponse]:
        balances = await self.ledger.account_balance(user_id, account)
        return [AmountResponse.from_domain(amount) for amount in balances]

    async def get_monthly_balance(
        self,
        user_id: str,
        account: str,
    ) -> dict[datetime.date, list[AmountResponse]]:
        monthly = await self.ledger.monthly_balance(user_id, account)
        return {
            month: [AmountResponse.from_domain(amount) for amount in amounts]
            for month, amounts in monthly.items()
        }

    async def get_periodic_balance(
        self,
        user_id: str,
        account: str,
        interval: ReportInterval,
    ) -> dict[str, CurrencyInstantBalancesResponse]:
        periodic = await self.ledger.periodic_cumulative_balance(user_id, account, interval)
        return {
            code: CurrencyInstantBalancesResponse.from_domain(series)
            for code, series in periodic.items()
        }

    async def list_currencies(self) -> list[CurrencyInfoResponse]:
        rows = await LedgerStore(self.db).list_currencies()
        return [
            CurrencyInfoResponse(
                code=row["code"],
                minor_units=row["minor_units"],
                symbol=row["symbol"],
            )
            for row in rows
        ]
