"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.ledger.errors import DatabaseError
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web", console_level=get_settings().log_level)

from web.routes import accounts, currencies, health, transactions
from web.routes.health import API_VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.ledger.schema import init_ledger_schema

    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화 + 통화 시드
    async with SQLiteAdapter(settings.db_path) as db:
        await init_ledger_schema(db, settings.currencies)

    logger.info(f"Web 시작: db={settings.db_path} page_size={settings.page_size}")

    yield

    logger.info("Web 종료")


app = FastAPI(
    title="Zeroed Books API",
    description="개인 복식부기 원장 API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """저장소 장애 → 500 (상세 내용은 로그에만 기록됨)"""
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(currencies.router)
app.include_router(accounts.router)
app.include_router(transactions.router)
