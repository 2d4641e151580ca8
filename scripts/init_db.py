"""
원장 DB 초기화

테이블/인덱스 생성 + settings.yaml의 통화 시드 삽입 후 검증.
여러 번 실행해도 안전하다.

사용법:
    python -m scripts.init_db
    python -m scripts.init_db --settings config/settings.yaml --db data/other.db
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import load_settings
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "currency",
    "account",
    "ledger_transaction",
    "transaction_entry",
)


async def verify_schema(db: SQLiteAdapter) -> bool:
    """필수 테이블 존재 확인"""
    for table in REQUIRED_TABLES:
        if not await db.table_exists(table):
            logger.error(f"테이블 누락: {table}")
            return False
        logger.info(f"테이블 확인: {table}")

    row = await db.fetchone("SELECT COUNT(*) FROM currency")
    logger.info(f"등록된 통화 수: {row[0] if row else 0}")

    return True


async def init_database(settings_path: Path | None = None, db_path: Path | None = None) -> Path:
    """DB 초기화 실행

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로)
        db_path: DB 경로 (None이면 설정값)

    Returns:
        초기화된 DB 경로

    Raises:
        RuntimeError: 스키마 검증 실패
    """
    settings = load_settings(settings_path)
    target = db_path or settings.db_path

    logger.info(f"DB 초기화 시작: {target}")

    async with SQLiteAdapter(target) as db:
        await init_ledger_schema(db, settings.currencies)

        if not await verify_schema(db):
            raise RuntimeError("스키마 검증 실패")

    logger.info("DB 초기화 완료")
    return target


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="원장 DB 초기화")
    parser.add_argument("--settings", type=Path, default=None, help="settings.yaml 경로")
    parser.add_argument("--db", type=Path, default=None, help="DB 파일 경로 (기본: 설정값)")
    args = parser.parse_args()

    setup_logging("scripts")
    asyncio.run(init_database(args.settings, args.db))
