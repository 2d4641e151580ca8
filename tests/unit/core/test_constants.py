"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 상수가 정상적으로 접근 가능한지 확인
"""

from pathlib import Path

from core.constants import PROJECT_ROOT, Defaults, LedgerDefaults, Paths


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_path(self) -> None:
        """PROJECT_ROOT가 Path 타입인지 확인"""
        assert isinstance(PROJECT_ROOT, Path)

    def test_project_root_is_absolute(self) -> None:
        """PROJECT_ROOT가 절대 경로인지 확인"""
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """PROJECT_ROOT에 core 디렉토리가 있는지 확인"""
        assert (PROJECT_ROOT / "core").is_dir()


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_objects(self) -> None:
        """모든 경로가 Path 타입"""
        for name in ("CONFIG_DIR", "DATA_DIR", "LOGS_DIR", "WEB_LOGS_DIR", "SETTINGS_FILE", "LEDGER_DB"):
            assert isinstance(getattr(Paths, name), Path), name

    def test_paths_under_project_root(self) -> None:
        assert Paths.LEDGER_DB.is_relative_to(PROJECT_ROOT)
        assert Paths.WEB_LOGS_DIR.parent == Paths.LOGS_DIR


class TestDefaults:
    """기본값 상수 테스트"""

    def test_web(self) -> None:
        assert isinstance(Defaults.WEB_PORT, int)
        assert Defaults.LOG_LEVEL == "INFO"

    def test_ledger(self) -> None:
        assert LedgerDefaults.PAGE_SIZE == 50
        assert LedgerDefaults.POPULAR_ACCOUNTS_LIMIT == 10

    def test_seed_currencies_within_supported_minor_units(self) -> None:
        codes = [code for code, _, _ in LedgerDefaults.CURRENCIES]

        assert len(codes) == len(set(codes))
        for _, minor_units, _ in LedgerDefaults.CURRENCIES:
            assert 0 <= minor_units <= LedgerDefaults.MAX_MINOR_UNITS
