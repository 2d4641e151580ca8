"""
타임존 유틸리티

내부 저장: UTC 원칙 준수를 위한 헬퍼 함수와 Clock 구현
"""

import threading
from datetime import date, datetime, timedelta, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def to_db_timestamp(dt: datetime) -> str:
    """datetime을 DB 저장용 고정폭 UTC 문자열로 변환

    마이크로초까지 항상 포함하므로 문자열 정렬 = 시간 정렬.

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        예: '2026-02-21T01:00:00.000000+00:00'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_timestamp(value: str) -> datetime:
    """DB 저장 문자열을 UTC datetime으로 변환"""
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def one_year_before(d: date) -> date:
    """1년 전 날짜 반환 (2월 29일은 2월 28일로)"""
    try:
        return d.replace(year=d.year - 1)
    except ValueError:
        return d.replace(year=d.year - 1, day=28)


def first_of_month(d: date) -> date:
    """해당 월의 1일"""
    return d.replace(day=1)


def start_of_week(d: date) -> date:
    """해당 ISO 주의 월요일"""
    return d - timedelta(days=d.weekday())


class SystemClock:
    """시스템 시계

    같은 프로세스에서 발급하는 now()는 항상 단조 증가한다.
    (date, created_at) 키가 페이지네이션 정렬 키로 쓰이기 때문에
    같은 마이크로초에 두 번 호출되면 1µs를 더해 발급.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last: datetime | None = None

    def now(self) -> datetime:
        with self._lock:
            current = now_utc()
            if self._last is not None and current <= self._last:
                current = self._last + timedelta(microseconds=1)
            self._last = current
            return current

    def today(self) -> date:
        return now_utc().date()


class FixedClock:
    """고정 시계 (테스트용)

    now()는 호출마다 step만큼 전진한다.

    Args:
        start: 시작 시각 (naive면 UTC로 간주)
        step: 호출 간 증가량 (기본 1ms)
    """

    def __init__(self, start: datetime, step: timedelta = timedelta(milliseconds=1)):
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._current = start
        self._step = step

    def now(self) -> datetime:
        current = self._current
        self._current = current + self._step
        return current

    def today(self) -> date:
        return self._current.date()


# 프로세스 공용 시계 (저장소 인스턴스가 여러 개여도 created_at 단조 증가 보장)
SYSTEM_CLOCK = SystemClock()
