"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → zeroed-books/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"


class LedgerDefaults:
    """원장 엔진 기본값"""

    # 거래 목록 한 페이지 크기 (keyset pagination)
    PAGE_SIZE: int = 50

    # 인기 계정 목록 최대 개수
    POPULAR_ACCOUNTS_LIMIT: int = 10

    # 금액 포맷/파싱이 보장되는 최대 소수 자릿수
    MAX_MINOR_UNITS: int = 8

    # 거래 항목 하나의 금액(minor units) 허용 범위 - 부호 있는 32비트 정수
    MIN_AMOUNT: int = -(2**31)
    MAX_AMOUNT: int = 2**31 - 1

    # (code, minor_units, symbol) - 초기 통화 시드
    CURRENCIES: tuple[tuple[str, int, str], ...] = (
        ("USD", 2, "$"),
        ("EUR", 2, "€"),
        ("GBP", 2, "£"),
        ("CAD", 2, "$"),
        ("JPY", 0, "¥"),
        ("KRW", 0, "₩"),
        ("BTC", 8, "₿"),
    )


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    LEDGER_DB: Path = DATA_DIR / "zeroed_books.db"
