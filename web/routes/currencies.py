"""
통화 라우트

GET /api/currencies - 등록 통화 목록
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from web.dependencies import get_db
from web.models.responses import CurrencyInfoResponse
from web.services.account_service import AccountService

router = APIRouter(prefix="/api", tags=["Currencies"])


@router.get("/currencies", response_model=list[CurrencyInfoResponse])
async def list_currencies(
    db: SQLiteAdapter = Depends(get_db),
) -> list[CurrencyInfoResponse]:
    """등록 통화 목록 (코드 순)"""
    return await AccountService(db).list_currencies()
