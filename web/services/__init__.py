"""
Web 서비스 패키지

원장 코어 호출과 응답 모델 변환
"""

from web.services.account_service import AccountService
from web.services.transaction_service import TransactionService

__all__ = [
    "AccountService",
    "TransactionService",
]
