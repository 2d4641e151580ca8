"""
통화와 금액

금액은 항상 minor units(예: 센트) 단위의 정수로 보관한다.
부동소수점은 어떤 경로로도 사용하지 않는다.

사용 예시:
```python
usd = Currency("USD", 2)
usd.parse_amount("1,128.93")          # 112893
CurrencyAmount(usd, -5).format_value()  # "-0.05"
```
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from core.constants import LedgerDefaults
from core.ledger.errors import InvalidNumber, TooManyDecimals

logger = logging.getLogger(__name__)

# 자릿수 구분 기호와 공백
_SEPARATORS = re.compile(r"[,\s]+")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DIGIT = re.compile(r"[0-9]")

# SQLite INTEGER 범위 (잔액 합계 포함 모든 금액의 상한)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def in_amount_range(value: int) -> bool:
    """거래 항목 금액이 허용 범위 안인지 확인"""
    return LedgerDefaults.MIN_AMOUNT <= value <= LedgerDefaults.MAX_AMOUNT


@dataclass(frozen=True)
class Currency:
    """통화

    Attributes:
        code: 고유 통화 코드 (예: "USD")
        minor_units: 소수 자릿수 (USD=2, JPY=0)
    """

    code: str
    minor_units: int

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("Currency code must not be empty")
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(f"minor_units must be int, got {type(self.minor_units).__name__}")
        if self.minor_units < 0:
            raise ValueError(f"minor_units must be non-negative, got {self.minor_units}")

    def parse_amount(self, raw_text: str) -> int:
        """사용자 입력 문자열을 minor units 정수로 변환

        Args:
            raw_text: 예: "1,128.93", "-.5", "8 675 309"

        Returns:
            minor units 정수

        Raises:
            TooManyDecimals: 소수점 이하 자릿수가 minor_units보다 많음
            InvalidNumber: 숫자로 해석 불가 또는 금액 허용 범위 초과
        """
        cleaned = _SEPARATORS.sub("", raw_text)
        # "", "-", "." 처럼 숫자가 하나도 없는 입력은 0이 아니라 오류
        if not _DIGIT.search(cleaned):
            raise InvalidNumber(raw_text)

        whole, dot, decimal = cleaned.rpartition(".")
        if not dot:
            whole, decimal = cleaned, ""
            digits = whole + "0" * self.minor_units
        else:
            if len(decimal) > self.minor_units:
                raise TooManyDecimals(self, len(decimal))
            digits = whole + decimal.ljust(self.minor_units, "0")

        if not _INTEGER.fullmatch(digits):
            raise InvalidNumber(raw_text)

        value = int(digits)
        if not in_amount_range(value):
            raise InvalidNumber(raw_text)

        return value

    def format_value(self, value: int) -> str:
        """minor units 정수를 소수 문자열로 변환 (parse_amount의 역연산)"""
        sign = "-" if value < 0 else ""
        digits = str(abs(value)).rjust(self.minor_units + 1, "0")

        if self.minor_units == 0:
            return f"{sign}{digits}"

        split = len(digits) - self.minor_units
        return f"{sign}{digits[:split]}.{digits[split:]}"


@dataclass(frozen=True)
class CurrencyAmount:
    """통화 금액

    Attributes:
        currency: 통화
        value: minor units 정수 (float 불가)
    """

    currency: Currency
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(
                f"CurrencyAmount value must be int, got {type(self.value).__name__}"
            )
        if not _INT64_MIN <= self.value <= _INT64_MAX:
            raise ValueError(f"CurrencyAmount value out of range: {self.value}")

    @classmethod
    def parse(cls, currency: Currency, raw_text: str) -> CurrencyAmount:
        return cls(currency, currency.parse_amount(raw_text))

    def format_value(self) -> str:
        return self.currency.format_value(self.value)

    def __neg__(self) -> CurrencyAmount:
        return CurrencyAmount(self.currency, -self.value)

    def __str__(self) -> str:
        return f"{self.format_value()} {self.currency.code}"


def parse_currency_amount(currency: Currency, text: str) -> CurrencyAmount:
    """금액 문자열 파싱

    Raises:
        CurrencyParseError: InvalidNumber 또는 TooManyDecimals
    """
    try:
        return CurrencyAmount.parse(currency, text)
    except (InvalidNumber, TooManyDecimals) as e:
        logger.debug(f"금액 파싱 실패: {currency.code} {text!r} ({e})")
        raise


def format_currency_amount(amount: CurrencyAmount) -> str:
    """금액을 소수 문자열로 변환"""
    return amount.format_value()
