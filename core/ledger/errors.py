"""
원장 예외 정의

입력 오류(CurrencyParseError, NewTransactionError)와
저장소 오류(UpdateTransactionError)를 구분한다.
호출자는 예외 타입만으로 "입력이 잘못됨"과 "시스템 실패"를 구별할 수 있어야 한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.ledger.currency import Currency


class LedgerError(Exception):
    """원장 예외 최상위 클래스"""

    pass


@dataclass(frozen=True)
class FieldError:
    """필드 단위 검증 오류

    Attributes:
        field: 필드 경로 (예: "payee", "entries[1].amount")
        code: 오류 코드 (예: "required", "too_few", "unbalanced")
        params: 화면 표시에 필요한 부가 정보
    """

    field: str
    code: str
    params: dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "code": self.code, "params": dict(self.params)}


# =========================================================================
# 통화 금액 파싱
# =========================================================================


class CurrencyParseError(LedgerError, ValueError):
    """금액 문자열 파싱 실패"""

    code = "invalid"


class InvalidNumber(CurrencyParseError):
    """숫자로 해석할 수 없는 금액 문자열"""

    code = "invalid_number"

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid number: {text!r}")


class TooManyDecimals(CurrencyParseError):
    """통화의 소수 자릿수보다 많은 소수점 이하 자릿수"""

    code = "too_many_decimals"

    def __init__(self, currency: Currency, decimals: int):
        self.currency = currency
        self.decimals = decimals
        super().__init__(
            f"{currency.code} allows {currency.minor_units} decimal places, "
            f"got {decimals}"
        )


# =========================================================================
# 거래 생성
# =========================================================================


class NewTransactionError(LedgerError, ValueError):
    """새 거래 생성 실패 (호출자 입력 오류)"""

    def field_errors(self) -> list[FieldError]:
        """HTTP 계층 표시용 필드 오류 목록"""
        return []


class TransactionValidationError(NewTransactionError):
    """구조적 검증 실패

    payee 누락, 항목 부족, 계정명 누락, 금액 누락 등.
    모든 오류를 한 번에 모아서 보고한다.
    """

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        fields = ", ".join(f"{e.field}:{e.code}" for e in self.errors)
        super().__init__(f"Transaction failed validation ({fields})")

    def field_errors(self) -> list[FieldError]:
        return list(self.errors)


class Unbalanced(NewTransactionError):
    """통화별 합계가 0이 아닌 거래

    Attributes:
        sums: 통화 → 0이 아닌 합계 (minor units)
    """

    def __init__(self, sums: dict[Currency, int]):
        self.sums = dict(sums)
        details = ", ".join(
            f"{currency.code}={value}"
            for currency, value in sorted(self.sums.items(), key=lambda kv: kv[0].code)
        )
        super().__init__(f"Unbalanced transaction: {details}")

    def field_errors(self) -> list[FieldError]:
        params = {
            f"currency_{currency.code}": value
            for currency, value in sorted(self.sums.items(), key=lambda kv: kv[0].code)
        }
        return [FieldError("entries", "unbalanced", params)]


# =========================================================================
# 거래 수정 / 저장소
# =========================================================================


class UpdateTransactionError(LedgerError):
    """거래 수정 실패"""

    pass


class TransactionNotFound(UpdateTransactionError):
    """대상 거래가 없거나 소유자가 다름"""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class DatabaseError(UpdateTransactionError):
    """저장소 장애 (호출자에게는 내부 오류로 노출)"""

    pass


class InvalidCursor(ValueError):
    """디코딩할 수 없는 페이지네이션 커서"""

    pass
