"""
거래 생성 및 자동 균형

사용자 입력(계정 + 선택적 금액 목록)을 검증된 복식부기 거래로 변환한다.
통화별 합계는 항상 0이어야 하며, 금액이 비어 있는 항목 하나는
나머지 항목의 잔액으로 자동 채워진다.

사용 예시:
```python
usd = Currency("USD", 2)
new_tx = build_transaction(
    user_id="user-1",
    date=date(2023, 4, 15),
    payee="Gas Station",
    notes=None,
    entries=[
        EntryData("Expenses:Gas", CurrencyAmount(usd, 2783)),
        EntryData("Liabilities:Credit", None),  # -2783 자동 계산
    ],
)
```
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from core.constants import LedgerDefaults
from core.ledger.currency import Currency, CurrencyAmount, in_amount_range
from core.ledger.errors import (
    FieldError,
    InvalidCursor,
    TransactionValidationError,
    Unbalanced,
)
from core.utils.timezone import from_db_timestamp, to_db_timestamp

logger = logging.getLogger(__name__)

# 복식부기 최소 항목 수
MIN_ENTRIES = 2


# =========================================================================
# 입력 데이터
# =========================================================================


@dataclass(frozen=True)
class EntryData:
    """거래 항목 입력

    amount가 None인 항목은 자동 균형 대상 (거래당 최대 1개)
    """

    account: str
    amount: CurrencyAmount | None = None


@dataclass(frozen=True)
class TransactionData:
    """거래 입력 (생성/수정 공용)"""

    date: date
    payee: str
    notes: str | None
    entries: list[EntryData]


# =========================================================================
# 도메인 타입
# =========================================================================


@dataclass(frozen=True)
class TransactionEntry:
    """거래 항목 (금액 확정)"""

    account: str
    amount: CurrencyAmount


@dataclass(frozen=True)
class NewTransaction:
    """검증/균형 완료, 아직 저장되지 않은 거래"""

    user_id: str
    date: date
    payee: str
    notes: str | None
    entries: tuple[TransactionEntry, ...]

    def currency_sums(self) -> dict[str, int]:
        """통화 코드별 합계 (항상 0)"""
        sums: dict[str, int] = {}
        for entry in self.entries:
            code = entry.amount.currency.code
            sums[code] = sums.get(code, 0) + entry.amount.value
        return sums


@dataclass(frozen=True)
class Transaction:
    """저장된 거래"""

    id: str
    user_id: str
    date: date
    payee: str
    notes: str | None
    entries: tuple[TransactionEntry, ...]
    created_at: datetime
    updated_at: datetime

    @property
    def cursor(self) -> TransactionCursor:
        """이 거래 바로 다음부터 조회하는 커서"""
        return TransactionCursor(self.date, self.created_at)


@dataclass(frozen=True)
class TransactionCursor:
    """keyset 페이지네이션 위치

    (date DESC, created_at DESC) 정렬 기준으로 이 위치보다
    엄격히 뒤에 있는 거래만 조회 대상이 된다.
    """

    after_date: date
    after_created_at: datetime

    def encode(self) -> str:
        """URL-safe base64 문자열로 인코딩"""
        raw = f"{self.after_date.isoformat()}/{to_db_timestamp(self.after_created_at)}"
        return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")

    @classmethod
    def decode(cls, encoded: str) -> TransactionCursor:
        """encode()의 역연산

        Raises:
            InvalidCursor: 형식이 잘못된 경우
        """
        try:
            padded = encoded + "=" * (-len(encoded) % 4)
            raw = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        except (binascii.Error, UnicodeError) as e:
            raise InvalidCursor(f"Improperly encoded cursor: {encoded!r}") from e

        str_date, sep, str_created_at = raw.partition("/")
        if not sep:
            raise InvalidCursor(f"Improperly encoded cursor: {encoded!r}")

        try:
            return cls(
                after_date=date.fromisoformat(str_date),
                after_created_at=from_db_timestamp(str_created_at),
            )
        except ValueError as e:
            raise InvalidCursor(f"Improperly encoded cursor: {encoded!r}") from e


@dataclass(frozen=True)
class TransactionQuery:
    """거래 목록 조회 조건

    Attributes:
        user_id: 소유자
        account: 계정 필터 (하위 계정 포함)
        after: 이전 페이지의 next 커서
    """

    user_id: str
    account: str | None = None
    after: TransactionCursor | None = None


@dataclass(frozen=True)
class TransactionCollection:
    """거래 목록 한 페이지"""

    items: list[Transaction] = field(default_factory=list)
    next: TransactionCursor | None = None


# =========================================================================
# 자동 균형
# =========================================================================


def try_balance(entries: list[EntryData]) -> list[EntryData]:
    """금액이 비어 있는 항목 하나를 나머지 항목의 잔액으로 채운다

    금액 없는 항목이 정확히 하나이고, 합계가 0이 아닌 통화가 정확히
    하나일 때만 채운다. 그 외에는 입력을 그대로 반환한다.

    Args:
        entries: 거래 항목 입력 (순서 유지)

    Returns:
        새 항목 목록
    """
    balancing_index: int | None = None
    sums: dict[str, int] = {}
    currencies: dict[str, Currency] = {}

    for index, entry in enumerate(entries):
        if entry.amount is None:
            if balancing_index is not None:
                logger.debug(
                    f"자동 균형 불가: 금액 없는 항목 2개 이상 "
                    f"(entries[{balancing_index}], entries[{index}])"
                )
                return list(entries)
            balancing_index = index
            continue

        code = entry.amount.currency.code
        currencies.setdefault(code, entry.amount.currency)
        sums[code] = sums.get(code, 0) + entry.amount.value

    if balancing_index is None:
        return list(entries)

    unbalanced = [(code, total) for code, total in sums.items() if total != 0]
    if len(unbalanced) != 1:
        logger.debug(f"자동 균형 불가: 불균형 통화 {len(unbalanced)}개")
        return list(entries)

    code, total = unbalanced[0]
    if not in_amount_range(-total):
        logger.debug(f"자동 균형 불가: 균형 금액 범위 초과 ({code} {-total})")
        return list(entries)

    balanced = list(entries)
    balanced[balancing_index] = replace(
        entries[balancing_index],
        amount=CurrencyAmount(currencies[code], -total),
    )
    return balanced


def _unbalanced_sums(entries: list[EntryData]) -> dict[Currency, int]:
    sums: dict[str, int] = {}
    currencies: dict[str, Currency] = {}
    for entry in entries:
        if entry.amount is None:
            continue
        code = entry.amount.currency.code
        currencies.setdefault(code, entry.amount.currency)
        sums[code] = sums.get(code, 0) + entry.amount.value

    return {currencies[code]: total for code, total in sums.items() if total != 0}


def _structural_errors(payee: str, entries: list[EntryData]) -> list[FieldError]:
    errors: list[FieldError] = []

    if not payee or not payee.strip():
        errors.append(FieldError("payee", "required"))

    if len(entries) < MIN_ENTRIES:
        errors.append(
            FieldError("entries", "too_few", {"min": MIN_ENTRIES, "actual": len(entries)})
        )

    for index, entry in enumerate(entries):
        if not entry.account or not entry.account.strip():
            errors.append(FieldError(f"entries[{index}].account", "required"))
        if entry.amount is not None and not in_amount_range(entry.amount.value):
            errors.append(out_of_range_error(f"entries[{index}].amount.value"))

    return errors


def _balancing_range_errors(entries: list[EntryData]) -> list[FieldError]:
    """균형 금액이 허용 범위를 넘어 채우지 못한 항목"""
    missing = [index for index, entry in enumerate(entries) if entry.amount is None]
    if len(missing) != 1:
        return []

    sums = list(_unbalanced_sums(entries).values())
    if len(sums) == 1 and not in_amount_range(-sums[0]):
        return [out_of_range_error(f"entries[{missing[0]}].amount")]
    return []


def out_of_range_error(field: str) -> FieldError:
    return FieldError(
        field,
        "out_of_range",
        {"min": LedgerDefaults.MIN_AMOUNT, "max": LedgerDefaults.MAX_AMOUNT},
    )


def _missing_amount_errors(entries: list[EntryData]) -> list[FieldError]:
    return [
        FieldError(f"entries[{index}].amount", "required")
        for index, entry in enumerate(entries)
        if entry.amount is None
    ]


def build_transaction(
    user_id: str,
    date: date,
    payee: str,
    notes: str | None,
    entries: list[EntryData],
) -> NewTransaction:
    """사용자 입력으로부터 균형 잡힌 새 거래 생성

    Args:
        user_id: 소유자 ID
        date: 거래일
        payee: 거래처
        notes: 메모 (선택)
        entries: 거래 항목 (금액 없는 항목은 최대 1개)

    Returns:
        NewTransaction (모든 통화 합계 0)

    Raises:
        TransactionValidationError: payee/계정명 누락, 항목 2개 미만,
            금액 없는 항목 2개 이상, 사용되지 않은 균형 항목,
            금액 허용 범위 초과
        Unbalanced: 통화별 합계가 0이 아닌 경우
    """
    entries = list(entries)
    balanced = try_balance(entries)

    errors = _structural_errors(payee, balanced)
    missing = _missing_amount_errors(balanced)
    if len(missing) > 1:
        errors.extend(missing)
    errors.extend(_balancing_range_errors(balanced))

    if errors:
        logger.debug(f"새 거래 검증 실패: {errors}")
        raise TransactionValidationError(errors)

    sums = _unbalanced_sums(balanced)
    if sums:
        unbalanced = Unbalanced(sums)
        logger.debug(f"새 거래 불균형: {unbalanced}")
        raise unbalanced

    if missing:
        # 이미 균형인데 금액 없는 항목이 남은 경우
        logger.debug(f"새 거래 검증 실패: 사용되지 않은 균형 항목 {missing[0].field}")
        raise TransactionValidationError(missing)

    return NewTransaction(
        user_id=user_id,
        date=date,
        payee=payee.strip(),
        notes=notes,
        entries=tuple(
            TransactionEntry(account=entry.account.strip(), amount=entry.amount)
            for entry in balanced
            if entry.amount is not None
        ),
    )


def build_from_data(user_id: str, data: TransactionData) -> NewTransaction:
    """TransactionData로부터 새 거래 생성 (build_transaction 래퍼)"""
    return build_transaction(
        user_id=user_id,
        date=data.date,
        payee=data.payee,
        notes=data.notes,
        entries=data.entries,
    )
