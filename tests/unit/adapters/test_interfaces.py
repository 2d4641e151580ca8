"""
Protocol 인터페이스 테스트

Protocol 타입 검증 및 구현 확인.
"""

from datetime import datetime, timezone

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import IAccountQueries, IClock, ICurrencyLookup, ITransactionRepo
from core.ledger.queries import AccountQueries
from core.ledger.store import LedgerStore
from core.utils.timezone import SYSTEM_CLOCK, FixedClock


class TestIClock:
    """IClock Protocol 테스트"""

    def test_system_clock_implements_protocol(self) -> None:
        assert isinstance(SYSTEM_CLOCK, IClock)

    def test_fixed_clock_implements_protocol(self) -> None:
        assert isinstance(FixedClock(datetime(2024, 1, 1, tzinfo=timezone.utc)), IClock)


class TestLedgerStoreProtocols:
    """LedgerStore가 거래 저장소 + 통화 조회를 겸하는지 확인"""

    def test_implements_protocols(self, tmp_path) -> None:
        store = LedgerStore(SQLiteAdapter(tmp_path / "test.db"))

        assert isinstance(store, ITransactionRepo)
        assert isinstance(store, ICurrencyLookup)

    def test_protocol_has_required_methods(self) -> None:
        """Protocol에 필수 메서드가 정의되어 있는지 확인"""
        required_methods = ["persist", "update", "delete", "get", "list", "by_codes"]

        for method_name in required_methods:
            assert callable(getattr(LedgerStore, method_name)), f"Missing method: {method_name}"


class TestIAccountQueries:
    """IAccountQueries Protocol 테스트"""

    def test_account_queries_implements_protocol(self, tmp_path) -> None:
        queries = AccountQueries(SQLiteAdapter(tmp_path / "test.db"))

        assert isinstance(queries, IAccountQueries)

    def test_store_is_not_account_queries(self, tmp_path) -> None:
        store = LedgerStore(SQLiteAdapter(tmp_path / "test.db"))

        assert not isinstance(store, IAccountQueries)
