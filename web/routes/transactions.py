"""
거래 라우트

거래 생성/수정/삭제/조회 API
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.errors import InvalidCursor, NewTransactionError, TransactionNotFound
from web.dependencies import get_app_settings, get_current_user_id, get_db, get_db_write
from web.models.requests import TransactionRequest
from web.models.responses import (
    ErrorResponse,
    FieldErrorResponse,
    TransactionCollectionResponse,
    TransactionResponse,
)
from web.services.transaction_service import TransactionService

router = APIRouter(prefix="/api", tags=["Transactions"])


def invalid_transaction(error: NewTransactionError) -> HTTPException:
    """검증/균형 실패 → 400 (필드별 오류 포함)"""
    body = ErrorResponse(
        message="Transaction is invalid.",
        errors=[FieldErrorResponse.from_domain(e) for e in error.field_errors()],
    )
    return HTTPException(status_code=400, detail=body.model_dump())


@router.get("/transactions", response_model=TransactionCollectionResponse)
async def list_transactions(
    account: str | None = Query(default=None, description="계정 필터 (하위 계정 포함)"),
    after: str | None = Query(default=None, description="이전 응답의 next 커서"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TransactionCollectionResponse:
    """거래 목록 조회 (date DESC, created_at DESC)"""
    service = TransactionService(db, page_size=settings.page_size)

    try:
        return await service.list_transactions(user_id, account, after)
    except InvalidCursor as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    request: TransactionRequest,
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> TransactionResponse:
    """거래 생성

    금액이 없는 항목 하나는 나머지 항목으로 자동 균형.
    """
    service = TransactionService(db)

    try:
        return await service.create_transaction(user_id, request)
    except NewTransactionError as e:
        raise invalid_transaction(e)


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str = Path(..., description="거래 ID"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransactionResponse:
    """거래 단건 조회"""
    service = TransactionService(db)

    transaction = await service.get_transaction(user_id, transaction_id)

    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found.")

    return transaction


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    request: TransactionRequest,
    transaction_id: str = Path(..., description="거래 ID"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> TransactionResponse:
    """거래 전체 교체"""
    service = TransactionService(db)

    try:
        return await service.update_transaction(user_id, transaction_id, request)
    except NewTransactionError as e:
        raise invalid_transaction(e)
    except TransactionNotFound:
        raise HTTPException(
            status_code=404,
            detail="No transaction found with the provided ID.",
        )


@router.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str = Path(..., description="거래 ID"),
    user_id: str = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> Response:
    """거래 삭제 (없는 거래도 204)"""
    service = TransactionService(db)

    await service.delete_transaction(user_id, transaction_id)

    return Response(status_code=204)
