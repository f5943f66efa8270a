import sys
import os

import pytest

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.core.config import Settings


def make_settings(**overrides) -> Settings:
    settings = Settings()
    settings.jdoodle_client_id = "client-id"
    settings.jdoodle_client_secret = "client-secret"
    settings.jdoodle_execute_url = "https://jdoodle.test/v1/execute"
    settings.jdoodle_credit_url = "https://jdoodle.test/v1/credit-spent"
    settings.execute_timeout_s = 30.0
    settings.quota_timeout_s = 10.0
    settings.batch_delay_s = 0.0
    settings.database_url = ""
    settings.jwt_secret = ""
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def unconfigured_settings():
    return make_settings(jdoodle_client_id="", jdoodle_client_secret="")
