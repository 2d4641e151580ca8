"""
계정 라우트

계정 목록, 잔액, 월별/기간별 리포트 API
"""

import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.types import ReportInterval
from web.dependencies import get_current_user_id, get_db
from web.models.responses import AmountResponse, CurrencyInstantBalancesResponse
from web.services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Accounts"])


@router.get("/accounts", response_model=list[str])
async def list_accounts(
    query: str | None = Query(default=None, description="계정명 부분 검색 (대소문자 무시)"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> list[str]:
    """많이 쓰는 계정 목록 (최대 10개)"""
    return await AccountService(db).list_accounts(user_id, query)


@router.get("/active-accounts", response_model=list[str])
async def list_active_accounts(
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> list[str]:
    """최근 1년간 사용된 계정 목록"""
    return await AccountService(db).list_active_accounts(user_id)


@router.get("/accounts/{account}/balance", response_model=list[AmountResponse])
async def get_account_balance(
    account: str = Path(..., description="계정명 (하위 계정 포함)"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> list[AmountResponse]:
    """계정 통화별 현재 잔액"""
    return await AccountService(db).get_balance(user_id, account)


@router.get(
    "/accounts/{account}/balance/monthly",
    response_model=dict[datetime.date, list[AmountResponse]],
)
async def get_account_balance_monthly(
    account: str = Path(..., description="계정명 (하위 계정 포함)"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> dict[datetime.date, list[AmountResponse]]:
    """최근 1년 월별 통화별 합계"""
    return await AccountService(db).get_monthly_balance(user_id, account)


@router.get(
    "/accounts/{account}/balance/periodic",
    response_model=dict[str, CurrencyInstantBalancesResponse],
)
async def get_account_balance_periodic(
    account: str = Path(..., description="계정명 (하위 계정 포함)"),
    interval: str | None = Query(default=None, description="daily | weekly | monthly (기본 monthly)"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, CurrencyInstantBalancesResponse]:
    """기간별 누적 잔액 (최근 1년)"""
    try:
        report_interval = ReportInterval(interval) if interval else ReportInterval.MONTHLY
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail="Valid intervals are 'daily', 'monthly', or 'weekly'.",
        )

    logger.debug(f"기간별 잔액 리포트 요청: account={account} interval={report_interval.value}")

    return await AccountService(db).get_periodic_balance(user_id, account, report_interval)
