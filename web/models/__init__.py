"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AmountRequest,
    EntryRequest,
    TransactionRequest,
)
from web.models.responses import (
    AmountResponse,
    CurrencyInfoResponse,
    CurrencyInstantBalancesResponse,
    CurrencyResponse,
    EntryResponse,
    ErrorResponse,
    FieldErrorResponse,
    HealthResponse,
    InstantBalanceResponse,
    TransactionCollectionResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "AmountRequest",
    "EntryRequest",
    "TransactionRequest",
    # Responses
    "AmountResponse",
    "CurrencyInfoResponse",
    "CurrencyInstantBalancesResponse",
    "CurrencyResponse",
    "EntryResponse",
    "ErrorResponse",
    "FieldErrorResponse",
    "HealthResponse",
    "InstantBalanceResponse",
    "TransactionCollectionResponse",
    "TransactionResponse",
]
