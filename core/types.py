"""
타입 정의 모듈

원장 전반에서 공유하는 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class ReportInterval(str, Enum):
    """잔액 리포트 집계 주기"""

    DAILY = "daily"
    WEEKLY = "weekly"  # ISO 주 (월요일 시작)
    MONTHLY = "monthly"

