"""
유틸리티 패키지

타임존 처리, 저장용 타임스탬프 변환, Clock 구현 등 공통 유틸리티
"""

from core.utils.timezone import (
    FixedClock,
    SYSTEM_CLOCK,
    SystemClock,
    first_of_month,
    from_db_timestamp,
    now_utc,
    one_year_before,
    start_of_week,
    to_db_timestamp,
)

__all__ = [
    "FixedClock",
    "SYSTEM_CLOCK",
    "SystemClock",
    "first_of_month",
    "from_db_timestamp",
    "now_utc",
    "one_year_before",
    "start_of_week",
    "to_db_timestamp",
]
