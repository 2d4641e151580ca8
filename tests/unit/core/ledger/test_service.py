"""
LedgerService 테스트

Protocol을 만족하는 인메모리 가짜 구현으로 주입하여
통화 해석, 오류 매핑, 저장소 위임을 확인한다.
"""

from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from adapters.interfaces import IAccountQueries, ICurrencyLookup, ITransactionRepo
from core.constants import LedgerDefaults
from core.ledger.currency import Currency, CurrencyAmount
from core.ledger.errors import (
    FieldError,
    TransactionNotFound,
    TransactionValidationError,
    Unbalanced,
)
from core.ledger.reports import InstantBalance, InstantBalances
from core.ledger.service import LedgerService, RawAmount, RawEntry
from core.ledger.transaction import (
    NewTransaction,
    Transaction,
    TransactionCollection,
    TransactionData,
    TransactionQuery,
)
from core.types import ReportInterval

CREATED_AT = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeCurrencies:
    def __init__(self, *currencies: Currency):
        self._currencies = {c.code: c for c in currencies}
        self.requested: list[set[str]] = []

    async def by_codes(self, codes: set[str]) -> dict[str, Currency]:
        self.requested.append(set(codes))
        return {code: self._currencies[code] for code in codes if code in self._currencies}


class FakeRepo:
    def __init__(self):
        self.saved: dict[str, Transaction] = {}

    async def persist(self, new_transaction: NewTransaction) -> Transaction:
        transaction = Transaction(
            id=f"tx-{len(self.saved) + 1}",
            user_id=new_transaction.user_id,
            date=new_transaction.date,
            payee=new_transaction.payee,
            notes=new_transaction.notes,
            entries=new_transaction.entries,
            created_at=CREATED_AT,
            updated_at=CREATED_AT,
        )
        self.saved[transaction.id] = transaction
        return transaction

    async def update(self, transaction_id: str, new_transaction: NewTransaction) -> Transaction:
        current = self.saved.get(transaction_id)
        if current is None or current.user_id != new_transaction.user_id:
            raise TransactionNotFound(transaction_id)
        updated = replace(
            current,
            date=new_transaction.date,
            payee=new_transaction.payee,
            notes=new_transaction.notes,
            entries=new_transaction.entries,
        )
        self.saved[transaction_id] = updated
        return updated

    async def delete(self, transaction_id: str, user_id: str) -> None:
        current = self.saved.get(transaction_id)
        if current is not None and current.user_id == user_id:
            del self.saved[transaction_id]

    async def get(self, transaction_id: str, user_id: str) -> Transaction | None:
        current = self.saved.get(transaction_id)
        if current is None or current.user_id != user_id:
            return None
        return current

    async def list(self, query: TransactionQuery) -> TransactionCollection:
        items = [t for t in self.saved.values() if t.user_id == query.user_id]
        return TransactionCollection(items=items)


class FakeAccounts:
    def __init__(self, usd: Currency):
        self.usd = usd
        self.calls: list[tuple] = []

    async def get_account_balance(self, user_id: str, account: str) -> list[CurrencyAmount]:
        self.calls.append(("balance", user_id, account))
        return [CurrencyAmount(self.usd, 1234)]

    async def get_monthly_balance(self, user_id: str, account: str):
        self.calls.append(("monthly", user_id, account))
        return {date(2024, 5, 1): [CurrencyAmount(self.usd, 50)]}

    async def periodic_cumulative_balance(self, user_id: str, account: str, interval):
        self.calls.append(("periodic", user_id, account, interval))
        return {"USD": InstantBalances(self.usd, [InstantBalance(date(2024, 5, 1), 50)])}

    async def list_accounts_by_popularity(self, user_id: str, search: str | None = None):
        self.calls.append(("popular", user_id, search))
        return ["Expenses:Gas"]

    async def list_active_accounts(self, user_id: str) -> list[str]:
        self.calls.append(("active", user_id))
        return ["Assets:Cash"]


@pytest.fixture
def currencies(usd: Currency, jpy: Currency) -> FakeCurrencies:
    return FakeCurrencies(usd, jpy)


@pytest.fixture
def repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture
def accounts(usd: Currency) -> FakeAccounts:
    return FakeAccounts(usd)


@pytest.fixture
def service(repo: FakeRepo, accounts: FakeAccounts, currencies: FakeCurrencies) -> LedgerService:
    return LedgerService(transactions=repo, accounts=accounts, currencies=currencies)


def gas_data(entries) -> TransactionData:
    return TransactionData(date(2023, 4, 15), "Gas Station", None, entries)


class TestFakesSatisfyProtocols:
    """가짜 구현이 Protocol을 만족하는지 확인"""

    def test_protocols(self, repo: FakeRepo, accounts: FakeAccounts, currencies: FakeCurrencies) -> None:
        assert isinstance(repo, ITransactionRepo)
        assert isinstance(accounts, IAccountQueries)
        assert isinstance(currencies, ICurrencyLookup)


class TestResolveEntries:
    """resolve_entries 테스트"""

    @pytest.mark.asyncio
    async def test_decimal_text_and_minor_units(
        self,
        service: LedgerService,
        currencies: FakeCurrencies,
        usd: Currency,
        jpy: Currency,
    ) -> None:
        """문자열은 파싱, 정수는 minor units 그대로"""
        entries = await service.resolve_entries([
            RawEntry("Expenses:Gas", RawAmount("USD", "27.83")),
            RawEntry("Expenses:Food", RawAmount("JPY", 1500)),
            RawEntry("Liabilities:Credit"),
        ])

        assert entries[0].amount == CurrencyAmount(usd, 2783)
        assert entries[1].amount == CurrencyAmount(jpy, 1500)
        assert entries[2].amount is None
        assert currencies.requested == [{"USD", "JPY"}]

    @pytest.mark.asyncio
    async def test_unknown_currency(self, service: LedgerService) -> None:
        with pytest.raises(TransactionValidationError) as exc_info:
            await service.resolve_entries([
                RawEntry("A", RawAmount("XYZ", "1.00")),
                RawEntry("B"),
            ])

        assert exc_info.value.errors == [
            FieldError("entries[0].amount.currency", "unknown_currency", {"code": "XYZ"}),
        ]

    @pytest.mark.asyncio
    async def test_integer_amount_range(self, service: LedgerService, usd: Currency) -> None:
        """정수 금액은 32비트 범위까지만 허용"""
        entries = await service.resolve_entries([
            RawEntry("A", RawAmount("USD", LedgerDefaults.MIN_AMOUNT)),
            RawEntry("B"),
        ])
        assert entries[0].amount == CurrencyAmount(usd, LedgerDefaults.MIN_AMOUNT)

        with pytest.raises(TransactionValidationError) as exc_info:
            await service.resolve_entries([
                RawEntry("A", RawAmount("USD", LedgerDefaults.MAX_AMOUNT + 1)),
                RawEntry("B", RawAmount("USD", 10**20)),
                RawEntry("C", RawAmount("USD", "99999999999999999999")),
            ])

        params = {"min": LedgerDefaults.MIN_AMOUNT, "max": LedgerDefaults.MAX_AMOUNT}
        assert exc_info.value.errors == [
            FieldError("entries[0].amount.value", "out_of_range", params),
            FieldError("entries[1].amount.value", "out_of_range", params),
            FieldError("entries[2].amount.value", "invalid_number"),
        ]

    @pytest.mark.asyncio
    async def test_parse_errors_collected(self, service: LedgerService) -> None:
        """파싱 오류는 항목별로 모두 모아서 보고"""
        with pytest.raises(TransactionValidationError) as exc_info:
            await service.resolve_entries([
                RawEntry("A", RawAmount("JPY", "1.0")),
                RawEntry("B", RawAmount("USD", "abc")),
            ])

        assert exc_info.value.errors == [
            FieldError("entries[0].amount.value", "too_many_decimals", {"max": 0, "actual": 1}),
            FieldError("entries[1].amount.value", "invalid_number"),
        ]


class TestTransactions:
    """거래 연산 위임 테스트"""

    @pytest.mark.asyncio
    async def test_create_transaction(self, service: LedgerService, repo: FakeRepo) -> None:
        entries = await service.resolve_entries([
            RawEntry("Expenses:Gas", RawAmount("USD", "27.83")),
            RawEntry("Liabilities:Credit"),
        ])

        saved = await service.create_transaction("user-1", gas_data(entries))

        assert saved.id in repo.saved
        assert [e.amount.value for e in saved.entries] == [2783, -2783]

    @pytest.mark.asyncio
    async def test_unbalanced_never_reaches_repo(
        self,
        service: LedgerService,
        repo: FakeRepo,
        usd: Currency,
    ) -> None:
        entries = await service.resolve_entries([
            RawEntry("A", RawAmount("USD", 100)),
            RawEntry("B", RawAmount("USD", 100)),
        ])

        with pytest.raises(Unbalanced):
            await service.create_transaction("user-1", gas_data(entries))

        assert repo.saved == {}

    @pytest.mark.asyncio
    async def test_build_then_persist(self, service: LedgerService, repo: FakeRepo) -> None:
        entries = await service.resolve_entries([
            RawEntry("A", RawAmount("USD", 100)),
            RawEntry("B"),
        ])

        new_tx = service.build_transaction("user-1", date(2024, 1, 1), "Payee", None, entries)
        saved = await service.persist(new_tx)

        assert saved.payee == "Payee"
        assert len(repo.saved) == 1

    @pytest.mark.asyncio
    async def test_update_and_get(self, service: LedgerService) -> None:
        entries = await service.resolve_entries([
            RawEntry("A", RawAmount("USD", 100)),
            RawEntry("B"),
        ])
        saved = await service.create_transaction("user-1", gas_data(entries))

        new_entries = await service.resolve_entries([
            RawEntry("C", RawAmount("USD", "5.00")),
            RawEntry("D"),
        ])
        updated = await service.update(
            saved.id,
            "user-1",
            TransactionData(date(2024, 2, 2), "Other", "memo", new_entries),
        )

        assert updated.payee == "Other"
        assert [e.account for e in updated.entries] == ["C", "D"]
        assert await service.get(saved.id, "user-1") == updated

    @pytest.mark.asyncio
    async def test_update_not_found(self, service: LedgerService) -> None:
        entries = await service.resolve_entries([
            RawEntry("A", RawAmount("USD", 100)),
            RawEntry("B"),
        ])

        with pytest.raises(TransactionNotFound):
            await service.update("missing", "user-1", gas_data(entries))

    @pytest.mark.asyncio
    async def test_delete_idempotent(self, service: LedgerService) -> None:
        await service.delete("missing", "user-1")

    @pytest.mark.asyncio
    async def test_list(self, service: LedgerService) -> None:
        entries = await service.resolve_entries([
            RawEntry("A", RawAmount("USD", 100)),
            RawEntry("B"),
        ])
        await service.create_transaction("user-1", gas_data(entries))

        collection = await service.list(TransactionQuery(user_id="user-1"))

        assert len(collection.items) == 1
        assert collection.next is None


class TestAmounts:
    """금액 파싱/포맷 노출"""

    def test_parse_and_format(self, usd: Currency) -> None:
        amount = LedgerService.parse_currency_amount(usd, "12.50")

        assert amount.value == 1250
        assert LedgerService.format_currency_amount(amount) == "12.50"


class TestAccountQueriesDelegation:
    """잔액/계정 조회 위임"""

    @pytest.mark.asyncio
    async def test_delegates(self, service: LedgerService, accounts: FakeAccounts) -> None:
        await service.account_balance("user-1", "Expenses")
        await service.monthly_balance("user-1", "Expenses")
        await service.periodic_cumulative_balance("user-1", "Expenses")
        await service.list_accounts("user-1", "gas")
        await service.list_active_accounts("user-1")

        assert accounts.calls == [
            ("balance", "user-1", "Expenses"),
            ("monthly", "user-1", "Expenses"),
            ("periodic", "user-1", "Expenses", ReportInterval.MONTHLY),
            ("popular", "user-1", "gas"),
            ("active", "user-1"),
        ]
