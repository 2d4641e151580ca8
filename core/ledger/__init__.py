"""
복식부기 (Double-Entry Bookkeeping) 원장 엔진

정수 minor units 금액, 자동 균형 거래 생성, keyset 페이지네이션,
기간별 누적 잔액 리포트.

사용 예시:
```python
from core.ledger import AccountQueries, LedgerService, LedgerStore

# 초기화
store = LedgerStore(db)
service = LedgerService(store, AccountQueries(db), store)

# 거래 생성 (Liabilities:Credit 금액은 자동 계산)
usd = Currency("USD", 2)
saved = await service.create_transaction(
    "user-1",
    TransactionData(
        date=date(2023, 4, 15),
        payee="Gas Station",
        notes=None,
        entries=[
            EntryData("Expenses:Gas", CurrencyAmount(usd, 2783)),
            EntryData("Liabilities:Credit"),
        ],
    ),
)

# 잔액 조회
balance = await service.account_balance("user-1", "Expenses")

# 목록 조회 (다음 페이지는 page.next 커서로)
page = await service.list(TransactionQuery(user_id="user-1"))
```
"""

from core.ledger.currency import (
    Currency,
    CurrencyAmount,
    format_currency_amount,
    parse_currency_amount,
)
from core.ledger.errors import (
    CurrencyParseError,
    DatabaseError,
    FieldError,
    InvalidCursor,
    InvalidNumber,
    LedgerError,
    NewTransactionError,
    TooManyDecimals,
    TransactionNotFound,
    TransactionValidationError,
    Unbalanced,
    UpdateTransactionError,
)
from core.ledger.transaction import (
    EntryData,
    NewTransaction,
    Transaction,
    TransactionCollection,
    TransactionCursor,
    TransactionData,
    TransactionEntry,
    TransactionQuery,
    build_transaction,
    try_balance,
)
from core.ledger.reports import InstantBalance, InstantBalances
from core.ledger.store import LedgerStore
from core.ledger.queries import AccountQueries
from core.ledger.service import LedgerService, RawAmount, RawEntry

__all__ = [
    # 핵심 클래스
    "LedgerService",
    "LedgerStore",
    "AccountQueries",
    # 금액
    "Currency",
    "CurrencyAmount",
    "parse_currency_amount",
    "format_currency_amount",
    # 거래
    "EntryData",
    "RawAmount",
    "RawEntry",
    "NewTransaction",
    "Transaction",
    "TransactionEntry",
    "TransactionData",
    "TransactionCursor",
    "TransactionQuery",
    "TransactionCollection",
    "build_transaction",
    "try_balance",
    # 리포트
    "InstantBalance",
    "InstantBalances",
    # 예외
    "LedgerError",
    "FieldError",
    "CurrencyParseError",
    "InvalidNumber",
    "TooManyDecimals",
    "NewTransactionError",
    "TransactionValidationError",
    "Unbalanced",
    "UpdateTransactionError",
    "TransactionNotFound",
    "DatabaseError",
    "InvalidCursor",
]
