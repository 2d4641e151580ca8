"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
원장 코어(LedgerService)는 구체 저장소가 아니라 이 Protocol에만 의존한다.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from core.ledger.currency import Currency, CurrencyAmount
    from core.ledger.reports import InstantBalances
    from core.ledger.transaction import (
        NewTransaction,
        Transaction,
        TransactionCollection,
        TransactionQuery,
    )
    from core.types import ReportInterval


@runtime_checkable
class IClock(Protocol):
    """시계 인터페이스

    created_at 발급과 리포트 기간("최근 1년") 계산에 사용.
    """

    def now(self) -> datetime:
        """현재 UTC 시각 (tz-aware)"""
        ...

    def today(self) -> date:
        """오늘 날짜 (UTC 기준)"""
        ...


@runtime_checkable
class ICurrencyLookup(Protocol):
    """통화 메타데이터 조회 인터페이스"""

    async def by_codes(self, codes: set[str]) -> dict[str, Currency]:
        """통화 코드 → Currency

        Args:
            codes: 조회할 통화 코드

        Returns:
            존재하는 코드만 포함한 매핑
        """
        ...


@runtime_checkable
class ITransactionRepo(Protocol):
    """거래 저장소 인터페이스

    persist/update는 거래 행과 항목 행을 하나의 원자적 단위로 기록해야 함.
    """

    async def persist(self, new_transaction: NewTransaction) -> Transaction:
        """새 거래 저장 (id, created_at, updated_at 발급)"""
        ...

    async def update(self, transaction_id: str, new_transaction: NewTransaction) -> Transaction:
        """거래 전체 교체

        Raises:
            TransactionNotFound: 대상이 없거나 소유자가 다름
            DatabaseError: 저장소 장애
        """
        ...

    async def delete(self, transaction_id: str, user_id: str) -> None:
        """거래 삭제 (멱등)"""
        ...

    async def get(self, transaction_id: str, user_id: str) -> Transaction | None:
        """거래 단건 조회"""
        ...

    async def list(self, query: TransactionQuery) -> TransactionCollection:
        """keyset 페이지네이션 목록 조회"""
        ...


@runtime_checkable
class IAccountQueries(Protocol):
    """계정 잔액/리포트 조회 인터페이스"""

    async def get_account_balance(self, user_id: str, account: str) -> list[CurrencyAmount]:
        ...

    async def get_monthly_balance(
        self,
        user_id: str,
        account: str,
    ) -> dict[date, list[CurrencyAmount]]:
        ...

    async def periodic_cumulative_balance(
        self,
        user_id: str,
        account: str,
        interval: ReportInterval,
    ) -> dict[str, InstantBalances]:
        ...

    async def list_accounts_by_popularity(
        self,
        user_id: str,
        search: str | None = None,
    ) -> list[str]:
        ...

    async def list_active_accounts(self, user_id: str) -> list[str]:
        ...
