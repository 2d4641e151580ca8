"""
거래 서비스

요청 모델 → 원장 코어 호출 → 응답 모델 변환
"""

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import LedgerDefaults
from core.ledger.queries import AccountQueries
from core.ledger.service import LedgerService
from core.ledger.store import LedgerStore
from core.ledger.transaction import TransactionCursor, TransactionQuery
from web.models.requests import TransactionRequest
from web.models.responses import TransactionCollectionResponse, TransactionResponse


def build_ledger_service(
    db: SQLiteAdapter,
    page_size: int = LedgerDefaults.PAGE_SIZE,
) -> LedgerService:
    """요청 단위 LedgerService 구성 (LedgerStore가 통화 조회도 겸함)"""
    store = LedgerStore(db, page_size=page_size)
    return LedgerService(
        transactions=store,
        accounts=AccountQueries(db),
        currencies=store,
    )


class TransactionService:
    """거래 서비스

    Args:
        db: SQLite 어댑터
        page_size: 목록 페이지 크기
    """

    def __init__(self, db: SQLiteAdapter, page_size: int = LedgerDefaults.PAGE_SIZE):
        self.db = db
        self.ledger = build_ledger_service(db, page_size)

    async def list_transactions(
        self,
        user_id: str,
        account: str | None = None,
        after: str | None = None,
    ) -> TransactionCollectionResponse:
        """거래 목록 조회

        Args:
            user_id: 소유자
            account: 계정 필터 (하위 계정 포함)
            after: 이전 응답의 next 커서

        Raises:
            InvalidCursor: 커서 형식 오류
        """
        query = TransactionQuery(
            user_id=user_id,
            account=account or None,
            after=TransactionCursor.decode(after) if after else None,
        )
        collection = await self.ledger.list(query)
        return TransactionCollectionResponse.from_domain(collection)

    async def get_transaction(
        self,
        user_id: str,
        transaction_id: str,
    ) -> TransactionResponse | None:
        transaction = await self.ledger.get(transaction_id, user_id)
        if transaction is None:
            return None
        return TransactionResponse.from_domain(transaction)

    async def create_transaction(
        self,
        user_id: str,
        request: TransactionRequest,
    ) -> TransactionResponse:
        """거래 생성

        Raises:
            NewTransactionError: 검증/균형 실패
        """
        entries = await self.ledger.resolve_entries(request.raw_entries())
        saved = await self.ledger.create_transaction(user_id, request.to_data(entries))
        return TransactionResponse.from_domain(saved)

    async def update_transaction(
        self,
        user_id: str,
        transaction_id: str,
        request: TransactionRequest,
    ) -> TransactionResponse:
        """거래 전체 교체

        Raises:
            NewTransactionError: 검증/균형 실패
            TransactionNotFound: 대상 없음
        """
        entries = await self.ledger.resolve_entries(request.raw_entries())
        saved = await self.ledger.update(transaction_id, user_id, request.to_data(entries))
        return TransactionResponse.from_domain(saved)

    async def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        await self.ledger.delete(transaction_id, user_id)
