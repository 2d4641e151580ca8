"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
구조 검증(타입/필수 키)만 여기서 하고, 복식부기 검증은 원장 코어가 담당한다.
"""

import datetime

from pydantic import BaseModel, Field, StrictInt

from core.ledger.service import RawAmount, RawEntry
from core.ledger.transaction import EntryData, TransactionData


class AmountRequest(BaseModel):
    """항목 금액"""

    currency: str = Field(..., min_length=1, description="통화 코드 (예: USD)")
    value: StrictInt | str = Field(
        ...,
        description="minor units 정수(2783) 또는 소수 문자열(\"27.83\")",
    )

    def to_raw(self) -> RawAmount:
        return RawAmount(currency=self.currency.strip().upper(), value=self.value)


class EntryRequest(BaseModel):
    """거래 항목"""

    account: str = Field(..., description="계정명 (콜론 구분, 예: Expenses:Gas)")
    amount: AmountRequest | None = Field(
        default=None,
        description="금액 (거래당 한 항목은 생략 가능, 자동 균형)",
    )

    def to_raw(self) -> RawEntry:
        return RawEntry(
            account=self.account,
            amount=self.amount.to_raw() if self.amount is not None else None,
        )


class TransactionRequest(BaseModel):
    """거래 생성/수정 요청"""

    date: datetime.date = Field(..., description="거래일 (YYYY-MM-DD)")
    payee: str = Field(..., description="거래처")
    notes: str | None = Field(default=None, description="메모")
    entries: list[EntryRequest] = Field(default_factory=list, description="거래 항목")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "date": "2023-04-15",
                    "payee": "Gas Station",
                    "notes": "Road trip",
                    "entries": [
                        {"account": "Expenses:Gas", "amount": {"currency": "USD", "value": "27.83"}},
                        {"account": "Liabilities:Credit", "amount": None},
                    ],
                },
            ]
        }
    }

    def raw_entries(self) -> list[RawEntry]:
        return [entry.to_raw() for entry in self.entries]

    def to_data(self, entries: list[EntryData]) -> TransactionData:
        """해석된 항목으로 TransactionData 생성"""
        return TransactionData(
            date=self.date,
            payee=self.payee,
            notes=self.notes,
            entries=entries,
        )
