"""
Web API 테스트 fixture

임시 원장 DB를 FastAPI 의존성에 주입하고 httpx로 ASGI 앱을 직접 호출한다.
"""

from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from web.app import app
from web.dependencies import get_app_settings, get_db, get_db_write

USER = "user-1"
OTHER_USER = "user-2"


@pytest.fixture
def headers() -> dict[str, str]:
    return {"X-User-Id": USER}


@pytest.fixture
def other_headers() -> dict[str, str]:
    return {"X-User-Id": OTHER_USER}


@pytest_asyncio.fixture
async def client(db: SQLiteAdapter, temp_settings_file: Path) -> httpx.AsyncClient:
    """임시 DB + 테스트 설정(page_size=20)이 주입된 클라이언트"""
    settings = Settings(temp_settings_file)

    async def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_db_write] = override_db
    app.dependency_overrides[get_app_settings] = lambda: settings

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
