"""
원장 서비스

원장 코어가 외부(HTTP 계층, 스크립트)에 노출하는 연산 모음.
저장소/조회/통화 조회는 adapters.interfaces의 Protocol로 주입받는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from core.ledger import transaction as tx
from core.ledger.currency import (
    CurrencyAmount,
    format_currency_amount,
    in_amount_range,
    parse_currency_amount,
)
from core.ledger.errors import (
    CurrencyParseError,
    FieldError,
    TooManyDecimals,
    TransactionValidationError,
)
from core.ledger.transaction import (
    EntryData,
    NewTransaction,
    Transaction,
    TransactionCollection,
    TransactionData,
    TransactionQuery,
)
from core.types import ReportInterval

if TYPE_CHECKING:
    from adapters.interfaces import IAccountQueries, ICurrencyLookup, ITransactionRepo
    from core.ledger.reports import InstantBalances

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawAmount:
    """사용자 입력 금액

    value는 minor units 정수 또는 "27.83" 같은 소수 문자열
    """

    currency: str
    value: int | str


@dataclass(frozen=True)
class RawEntry:
    """사용자 입력 거래 항목 (통화 미확인)"""

    account: str
    amount: RawAmount | None = None


def _parse_error(index: int, error: CurrencyParseError) -> FieldError:
    params: dict[str, object] = {}
    if isinstance(error, TooManyDecimals):
        params = {"max": error.currency.minor_units, "actual": error.decimals}
    return FieldError(f"entries[{index}].amount.value", error.code, params)


class LedgerService:
    """원장 서비스

    Args:
        transactions: 거래 저장소 (ITransactionRepo)
        accounts: 계정 조회 (IAccountQueries)
        currencies: 통화 조회 (ICurrencyLookup)

    사용 예시:
    ```python
    store = LedgerStore(db)
    service = LedgerService(store, AccountQueries(db), store)

    entries = await service.resolve_entries([
        RawEntry("Expenses:Gas", RawAmount("USD", "27.83")),
        RawEntry("Liabilities:Credit"),
    ])
    saved = await service.create_transaction(
        "user-1", TransactionData(date(2023, 4, 15), "Gas Station", None, entries)
    )
    ```
    """

    def __init__(
        self,
        transactions: ITransactionRepo,
        accounts: IAccountQueries,
        currencies: ICurrencyLookup,
    ):
        self.transactions = transactions
        self.accounts = accounts
        self.currencies = currencies

    # -------------------------------------------------------------------------
    # 금액
    # -------------------------------------------------------------------------

    parse_currency_amount = staticmethod(parse_currency_amount)
    format_currency_amount = staticmethod(format_currency_amount)

    async def resolve_entries(self, raw_entries: list[RawEntry]) -> list[EntryData]:
        """통화 코드를 조회하고 금액을 파싱하여 EntryData 목록 생성

        Raises:
            TransactionValidationError: 알 수 없는 통화, 금액 파싱 실패, 금액 범위 초과
        """
        codes = {
            entry.amount.currency
            for entry in raw_entries
            if entry.amount is not None
        }
        known = await self.currencies.by_codes(codes)

        errors: list[FieldError] = []
        resolved: list[EntryData] = []

        for index, entry in enumerate(raw_entries):
            if entry.amount is None:
                resolved.append(EntryData(entry.account, None))
                continue

            currency = known.get(entry.amount.currency)
            if currency is None:
                errors.append(
                    FieldError(
                        f"entries[{index}].amount.currency",
                        "unknown_currency",
                        {"code": entry.amount.currency},
                    )
                )
                continue

            value = entry.amount.value
            if isinstance(value, str):
                try:
                    amount = parse_currency_amount(currency, value)
                except CurrencyParseError as e:
                    errors.append(_parse_error(index, e))
                    continue
            elif not in_amount_range(value):
                errors.append(tx.out_of_range_error(f"entries[{index}].amount.value"))
                continue
            else:
                amount = CurrencyAmount(currency, value)

            resolved.append(EntryData(entry.account, amount))

        if errors:
            logger.debug(f"거래 항목 해석 실패: {errors}")
            raise TransactionValidationError(errors)

        return resolved

    # -------------------------------------------------------------------------
    # 거래
    # -------------------------------------------------------------------------

    def build_transaction(
        self,
        user_id: str,
        date: date,
        payee: str,
        notes: str | None,
        entries: list[EntryData],
    ) -> NewTransaction:
        """검증 + 자동 균형 (저장하지 않음)"""
        return tx.build_transaction(user_id, date, payee, notes, entries)

    async def persist(self, new_transaction: NewTransaction) -> Transaction:
        return await self.transactions.persist(new_transaction)

    async def create_transaction(self, user_id: str, data: TransactionData) -> Transaction:
        """거래 생성 + 저장

        Raises:
            NewTransactionError: 입력 오류
            DatabaseError: 저장소 장애
        """
        new_transaction = tx.build_from_data(user_id, data)
        saved = await self.transactions.persist(new_transaction)
        logger.info(f"거래 생성: {saved.id} user={user_id} payee={saved.payee!r}")
        return saved

    async def update(
        self,
        transaction_id: str,
        user_id: str,
        data: TransactionData,
    ) -> Transaction:
        """거래 전체 교체

        Raises:
            NewTransactionError: 입력 오류 (저장소 접근 전)
            TransactionNotFound: 대상 없음
            DatabaseError: 저장소 장애
        """
        new_transaction = tx.build_from_data(user_id, data)
        saved = await self.transactions.update(transaction_id, new_transaction)
        logger.info(f"거래 수정: {transaction_id} user={user_id}")
        return saved

    async def delete(self, transaction_id: str, user_id: str) -> None:
        await self.transactions.delete(transaction_id, user_id)

    async def get(self, transaction_id: str, user_id: str) -> Transaction | None:
        return await self.transactions.get(transaction_id, user_id)

    async def list(self, query: TransactionQuery) -> TransactionCollection:
        return await self.transactions.list(query)

    # -------------------------------------------------------------------------
    # 잔액 / 계정
    # -------------------------------------------------------------------------

    async def account_balance(self, user_id: str, account: str) -> list[CurrencyAmount]:
        return await self.accounts.get_account_balance(user_id, account)

    async def monthly_balance(
        self,
        user_id: str,
        account: str,
    ) -> dict[date, list[CurrencyAmount]]:
        return await self.accounts.get_monthly_balance(user_id, account)

    async def periodic_cumulative_balance(
        self,
        user_id: str,
        account: str,
        interval: ReportInterval = ReportInterval.MONTHLY,
    ) -> dict[str, InstantBalances]:
        logger.debug(f"기간별 누적 잔액 리포트 생성: account={account} interval={interval}")
        return await self.accounts.periodic_cumulative_balance(user_id, account, interval)

    async def list_accounts(self, user_id: str, search: str | None = None) -> list[str]:
        return await self.accounts.list_accounts_by_popularity(user_id, search)

    async def list_active_accounts(self, user_id: str) -> list[str]:
        return await self.accounts.list_active_accounts(user_id)
