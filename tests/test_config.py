import pytest

from app.core.config import Settings

_ENV_KEYS = (
    "JDOODLE_CLIENT_ID",
    "JDOODLE_CLIENT_SECRET",
    "JDOODLE_EXECUTE_URL",
    "JDOODLE_CREDIT_URL",
    "EXECUTE_TIMEOUT_S",
    "QUOTA_TIMEOUT_S",
    "BATCH_DELAY_MS",
    "DEBUG",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings()

    assert settings.execute_timeout_s == 30.0
    assert settings.quota_timeout_s == 10.0
    assert settings.batch_delay_s == 0.5
    assert settings.jdoodle_execute_url == "https://api.jdoodle.com/v1/execute"
    assert settings.jdoodle_credit_url == "https://api.jdoodle.com/v1/credit-spent"
    assert settings.execution_configured is False
    assert settings.log_level == "INFO"


def test_env_overrides(clean_env):
    clean_env.setenv("JDOODLE_CLIENT_ID", " id ")
    clean_env.setenv("JDOODLE_CLIENT_SECRET", "secret")
    clean_env.setenv("EXECUTE_TIMEOUT_S", "12.5")
    clean_env.setenv("BATCH_DELAY_MS", "250")

    settings = Settings()

    assert settings.jdoodle_client_id == "id"
    assert settings.execution_configured is True
    assert settings.execute_timeout_s == 12.5
    assert settings.batch_delay_s == 0.25


def test_unparseable_numbers_fall_back_to_defaults(clean_env):
    clean_env.setenv("QUOTA_TIMEOUT_S", "soon")

    assert Settings().quota_timeout_s == 10.0
