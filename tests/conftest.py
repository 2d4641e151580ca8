"""
pytest 공통 fixture 정의

임시 디렉토리, 설정 파일, 스키마가 준비된 임시 원장 DB
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import CurrencySeed, Settings
from core.ledger.currency import Currency
from core.ledger.schema import init_ledger_schema
from core.utils.timezone import FixedClock

TEST_CURRENCIES = (
    CurrencySeed("USD", 2, "$"),
    CurrencySeed("EUR", 2, "€"),
    CurrencySeed("JPY", 0, "¥"),
    CurrencySeed("BTC", 8, "₿"),
)


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """Settings 싱글턴 초기화 (테스트 간 격리)"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = """# 테스트용 settings.yaml
database:
  path: ledger.db

web:
  host: 0.0.0.0
  port: 9000

logging:
  level: debug

ledger:
  page_size: 20
  currencies:
    - { code: usd, minor_units: 2, symbol: "$" }
    - { code: JPY, minor_units: 0 }
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def usd() -> Currency:
    return Currency("USD", 2)


@pytest.fixture
def eur() -> Currency:
    return Currency("EUR", 2)


@pytest.fixture
def jpy() -> Currency:
    return Currency("JPY", 0)


@pytest.fixture
def clock() -> FixedClock:
    """2024-06-15 12:00 UTC에서 시작, 호출마다 1ms 전진"""
    return FixedClock(datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def db(temp_dir: Path) -> SQLiteAdapter:
    """원장 스키마와 통화 시드가 준비된 임시 DB"""
    adapter = SQLiteAdapter(temp_dir / "test_ledger.db")
    await adapter.connect()

    await init_ledger_schema(adapter, TEST_CURRENCIES)

    yield adapter

    await adapter.close()
