"""
잔액 리포트 계산

저장소에서 (거래일, 통화) 단위로 미리 집계된 합계를 받아
기간 단위로 절사하고 통화별 누적합(prefix sum)을 계산한다.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from core.ledger.currency import Currency
from core.types import ReportInterval
from core.utils.timezone import first_of_month, start_of_week


@dataclass(frozen=True)
class InstantBalance:
    """특정 시점의 누적 잔액"""

    instant: date
    amount: int


@dataclass
class InstantBalances:
    """한 통화의 시점별 누적 잔액 시계열 (instant 오름차순)"""

    currency: Currency
    balances: list[InstantBalance] = field(default_factory=list)

    def push(self, balance: InstantBalance) -> None:
        self.balances.append(balance)


@dataclass(frozen=True)
class DailyAmount:
    """거래일 + 통화 단위 합계 (저장소 집계 결과)"""

    day: date
    currency: Currency
    amount: int


def truncate_date(d: date, interval: ReportInterval) -> date:
    """날짜를 집계 주기의 시작일로 절사

    Args:
        d: 거래일
        interval: 일/주(월요일)/월(1일)

    Returns:
        주기 시작일
    """
    if interval == ReportInterval.DAILY:
        return d
    if interval == ReportInterval.WEEKLY:
        return start_of_week(d)
    if interval == ReportInterval.MONTHLY:
        return first_of_month(d)
    raise ValueError(f"Unsupported report interval: {interval!r}")


def cumulative_balances(
    rows: Iterable[DailyAmount],
    interval: ReportInterval,
    window_start: date,
) -> dict[str, InstantBalances]:
    """기간별 누적 잔액 계산

    전체 이력을 누적한 뒤, 절사된 기간이 window_start(이미 절사된 날짜)
    이상인 기간만 남긴다. 각 점은 해당 기간까지의 누적 잔액이며,
    항목이 있는 기간만 포함된다.

    Args:
        rows: 거래일/통화별 합계 (순서 무관)
        interval: 집계 주기
        window_start: 결과에 포함할 첫 기간

    Returns:
        통화 코드 → InstantBalances
    """
    period_sums: dict[str, dict[date, int]] = {}
    currencies: dict[str, Currency] = {}

    for row in rows:
        code = row.currency.code
        currencies.setdefault(code, row.currency)
        periods = period_sums.setdefault(code, {})
        period = truncate_date(row.day, interval)
        periods[period] = periods.get(period, 0) + row.amount

    result: dict[str, InstantBalances] = {}
    for code in sorted(period_sums):
        running = 0
        series = InstantBalances(currencies[code])
        for period in sorted(period_sums[code]):
            running += period_sums[code][period]
            if period >= window_start:
                series.push(InstantBalance(period, running))
        if series.balances:
            result[code] = series

    return result
