import logging

import pytest

from ossgate.config import GLOBAL_ENV_OVERRIDES


def pytest_configure(config):
    logging.getLogger("ossgate").setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for env_name in GLOBAL_ENV_OVERRIDES.values():
        monkeypatch.delenv(env_name, raising=False)
    for name in ("HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy", "OSSGATE_REPORT_ENABLED"):
        monkeypatch.delenv(name, raising=False)
