import pytest
from pydantic import ValidationError

from game.config import Settings, get_settings
from rulery import OutcomePolicy


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch) -> None:
    for name in ("RULERY_RULES_PATH", "RULERY_RULES_DIR", "RULERY_LOG_LEVEL", "RULERY_OUTCOME_POLICY"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.rules_path is None
    assert settings.rules_dir is None
    assert settings.log_level == "INFO"
    assert settings.outcome_policy is OutcomePolicy.LOSE_FIRST


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("RULERY_RULES_DIR", str(tmp_path))
    monkeypatch.setenv("RULERY_LOG_LEVEL", "debug")
    monkeypatch.setenv("RULERY_OUTCOME_POLICY", "win_first")
    settings = get_settings()
    assert settings.rules_dir == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.outcome_policy is OutcomePolicy.WIN_FIRST
    assert get_settings() is settings


def test_invalid_log_level(monkeypatch) -> None:
    monkeypatch.setenv("RULERY_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
