"""
어댑터 레이어

외부 협력자(DB, 시계, 통화 조회 등)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import (
    IAccountQueries,
    IClock,
    ICurrencyLookup,
    ITransactionRepo,
)

__all__ = [
    "IAccountQueries",
    "IClock",
    "ICurrencyLookup",
    "ITransactionRepo",
]
