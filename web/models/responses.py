"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.ledger.currency import Currency, CurrencyAmount
from core.ledger.errors import FieldError
from core.ledger.reports import InstantBalances
from core.ledger.transaction import Transaction, TransactionCollection


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    timestamp: datetime.datetime = Field(..., description="응답 시간 (UTC)")


class CurrencyResponse(BaseModel):
    """통화"""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., description="통화 코드")
    minor_units: int = Field(..., alias="minorUnits", description="소수 자릿수")

    @classmethod
    def from_domain(cls, currency: Currency) -> "CurrencyResponse":
        return cls(code=currency.code, minor_units=currency.minor_units)


class CurrencyInfoResponse(CurrencyResponse):
    """등록 통화 (기호 포함)"""

    symbol: str = Field(default="", description="통화 기호")


class AmountResponse(BaseModel):
    """통화 금액"""

    currency: CurrencyResponse
    value: int = Field(..., description="minor units 정수")
    formatted: str = Field(..., description="소수 문자열 (예: 27.83)")

    @classmethod
    def from_domain(cls, amount: CurrencyAmount) -> "AmountResponse":
        return cls(
            currency=CurrencyResponse.from_domain(amount.currency),
            value=amount.value,
            formatted=amount.format_value(),
        )


class EntryResponse(BaseModel):
    """거래 항목"""

    account: str
    amount: AmountResponse


class TransactionResponse(BaseModel):
    """거래"""

    id: str
    date: datetime.date
    payee: str
    notes: str | None = None
    entries: list[EntryResponse]
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,
            date=transaction.date,
            payee=transaction.payee,
            notes=transaction.notes,
            entries=[
                EntryResponse(
                    account=entry.account,
                    amount=AmountResponse.from_domain(entry.amount),
                )
                for entry in transaction.entries
            ],
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
        )


class TransactionCollectionResponse(BaseModel):
    """거래 목록 한 페이지"""

    next: str | None = Field(default=None, description="다음 페이지 커서 (after 파라미터)")
    items: list[TransactionResponse]

    @classmethod
    def from_domain(cls, collection: TransactionCollection) -> "TransactionCollectionResponse":
        return cls(
            next=collection.next.encode() if collection.next is not None else None,
            items=[TransactionResponse.from_domain(t) for t in collection.items],
        )


class InstantBalanceResponse(BaseModel):
    """시점 누적 잔액"""

    instant: datetime.date
    balance: int


class CurrencyInstantBalancesResponse(BaseModel):
    """통화별 누적 잔액 시계열"""

    currency: CurrencyResponse
    balances: list[InstantBalanceResponse]

    @classmethod
    def from_domain(cls, series: InstantBalances) -> "CurrencyInstantBalancesResponse":
        return cls(
            currency=CurrencyResponse.from_domain(series.currency),
            balances=[
                InstantBalanceResponse(instant=b.instant, balance=b.amount)
                for b in series.balances
            ],
        )


class FieldErrorResponse(BaseModel):
    """필드 오류"""

    field: str
    code: str
    params: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, error: FieldError) -> "FieldErrorResponse":
        return cls(field=error.field, code=error.code, params=dict(error.params))


class ErrorResponse(BaseModel):
    """오류 응답 (400)"""

    message: str
    errors: list[FieldErrorResponse] = Field(default_factory=list)
