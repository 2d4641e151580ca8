"""
설정 로더

settings.yaml 로드 및 원장 설정 생성.
파일이 없으면 기본값으로 동작한다.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, LedgerDefaults, Paths


@dataclass(frozen=True)
class CurrencySeed:
    """초기 통화 정의 (currency 테이블 시드)"""

    code: str
    minor_units: int
    symbol: str = ""


@dataclass(frozen=True)
class LedgerSettings:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: Path = Paths.LEDGER_DB
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT
    log_level: str = Defaults.LOG_LEVEL
    page_size: int = LedgerDefaults.PAGE_SIZE
    currencies: tuple[CurrencySeed, ...] = field(
        default_factory=lambda: tuple(
            CurrencySeed(code, minor_units, symbol)
            for code, minor_units, symbol in LedgerDefaults.CURRENCIES
        )
    )


class SettingsLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션은 매핑이어야 합니다")
    return value


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise SettingsLoadError(f"'{key}'는 양의 정수여야 합니다: {value!r}")
    return value


def _parse_currencies(raw: Any) -> tuple[CurrencySeed, ...]:
    if not isinstance(raw, list) or not raw:
        raise SettingsLoadError("'ledger.currencies'는 비어 있지 않은 목록이어야 합니다")

    seeds = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise SettingsLoadError(f"ledger.currencies[{index}]는 매핑이어야 합니다")

        code = item.get("code")
        if not isinstance(code, str) or not code.strip():
            raise SettingsLoadError(f"ledger.currencies[{index}]에 'code'가 없습니다")

        minor_units = item.get("minor_units")
        if (
            isinstance(minor_units, bool)
            or not isinstance(minor_units, int)
            or not 0 <= minor_units <= LedgerDefaults.MAX_MINOR_UNITS
        ):
            raise SettingsLoadError(
                f"ledger.currencies[{index}].minor_units는 "
                f"0~{LedgerDefaults.MAX_MINOR_UNITS} 범위의 정수여야 합니다: {minor_units!r}"
            )

        seeds.append(
            CurrencySeed(
                code=code.strip().upper(),
                minor_units=minor_units,
                symbol=str(item.get("symbol") or ""),
            )
        )

    return tuple(seeds)


def load_settings(path: Path | None = None) -> LedgerSettings:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerSettings 인스턴스 (파일이 없으면 기본값)

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return LedgerSettings()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return LedgerSettings()
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    defaults = LedgerSettings()

    database = _section(data, "database")
    db_path = Path(database["path"]) if database.get("path") else defaults.db_path
    if not db_path.is_absolute():
        db_path = PROJECT_ROOT / db_path

    web = _section(data, "web")
    web_host = str(web.get("host", defaults.web_host))
    web_port = _positive_int(web.get("port", defaults.web_port), "web.port")

    logging_config = _section(data, "logging")
    log_level = str(logging_config.get("level", defaults.log_level)).upper()

    ledger = _section(data, "ledger")
    page_size = _positive_int(ledger.get("page_size", defaults.page_size), "ledger.page_size")
    currencies = (
        _parse_currencies(ledger["currencies"])
        if "currencies" in ledger
        else defaults.currencies
    )

    return LedgerSettings(
        db_path=db_path,
        web_host=web_host,
        web_port=web_port,
        log_level=log_level,
        page_size=page_size,
        currencies=currencies,
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _settings: LedgerSettings | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._settings is None:
            self._settings = load_settings(settings_path)

    @property
    def db_path(self) -> Path:
        """원장 DB 경로"""
        assert self._settings is not None
        return self._settings.db_path

    @property
    def web_host(self) -> str:
        assert self._settings is not None
        return self._settings.web_host

    @property
    def web_port(self) -> int:
        assert self._settings is not None
        return self._settings.web_port

    @property
    def log_level(self) -> str:
        assert self._settings is not None
        return self._settings.log_level

    @property
    def page_size(self) -> int:
        """거래 목록 페이지 크기"""
        assert self._settings is not None
        return self._settings.page_size

    @property
    def currencies(self) -> tuple[CurrencySeed, ...]:
        """초기 통화 목록"""
        assert self._settings is not None
        return self._settings.currencies

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._settings = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
