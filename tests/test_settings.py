from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from ossgate.integrations.compliance.proxy import HostProxyConfiguration
from ossgate.policy.mode import PolicyCheckMode
from ossgate.settings import (
    DEFAULT_TIMEOUT,
    GlobalSettings,
    JobSettings,
    load_settings,
    load_settings_file,
    resolve_api_token,
    resolve_connection_timeout,
    resolve_effective_config,
    validate_settings,
)


def _write(path: Path, content: str) -> None:
    path.write_text(dedent(content).strip() + "\n", encoding="utf-8")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("30", 30),
        (" 45 ", 45),
        ("-5", DEFAULT_TIMEOUT),
        ("0", DEFAULT_TIMEOUT),
        ("abc", DEFAULT_TIMEOUT),
        ("1.5", DEFAULT_TIMEOUT),
        ("", DEFAULT_TIMEOUT),
        (None, DEFAULT_TIMEOUT),
    ],
)
def test_resolve_connection_timeout(raw, expected):
    assert resolve_connection_timeout(raw) == expected


def test_job_token_wins_when_not_blank():
    global_settings = GlobalSettings(api_token="ORG123")
    assert resolve_api_token(JobSettings(api_token="JOB1"), global_settings) == "JOB1"
    assert resolve_api_token(JobSettings(api_token="   "), global_settings) == "ORG123"
    assert resolve_api_token(JobSettings(), GlobalSettings()) is None


def test_effective_config_merges_job_over_global():
    global_settings = GlobalSettings(
        api_token="ORG123",
        service_url="https://wss.example.com",
        check_policies="enableNew",
        fail_on_error=True,
        connection_timeout="15",
    )
    job = JobSettings(
        check_policies="enableAll",
        product="acme",
        product_version="2.0",
        requester_email="dev@acme.io",
    )
    config = resolve_effective_config(job, global_settings)
    assert config.api_token == "ORG123"
    assert config.policy_mode is PolicyCheckMode.CHECK_ALL
    assert config.check_all_libraries is True
    assert config.fail_on_error is True
    assert config.connection_timeout == 15
    assert config.product == "acme"
    assert config.requester_email == "dev@acme.io"
    assert config.proxy is None


def test_effective_config_is_none_without_token():
    assert resolve_effective_config(JobSettings(), GlobalSettings(check_policies="enableAll")) is None


def test_effective_config_uses_ambient_proxy():
    ambient = HostProxyConfiguration(name="proxy.corp", port=8080)
    config = resolve_effective_config(JobSettings(api_token="JOB1"), GlobalSettings(), ambient)
    assert config.proxy.host == "proxy.corp"
    assert config.proxy.port == 8080


def test_load_settings_file_reads_both_sections(tmp_path):
    path = tmp_path / "ossgate.yaml"
    _write(
        path,
        """
        global:
          service_url: https://wss.example.com
          api_token: ORG123
          check_policies: enableAll
          connection_timeout: 30
          fail_on_error: true
        job:
          product: acme
          module_tokens: |
            core=TOKEN-CORE
            web=TOKEN-WEB
        """,
    )
    global_settings, job = load_settings_file(str(path))
    assert global_settings.connection_timeout == "30"
    assert global_settings.fail_on_error is True
    assert job.product == "acme"
    assert "core=TOKEN-CORE" in job.module_tokens


def test_environment_overrides_global_values():
    global_settings, _job = load_settings(
        {"global": {"api_token": "ORG123", "fail_on_error": False}},
        environ={"OSSGATE_API_TOKEN": "ENV-TOKEN", "OSSGATE_FAIL_ON_ERROR": "true"},
    )
    assert global_settings.api_token == "ENV-TOKEN"
    assert global_settings.fail_on_error is True


def test_unknown_keys_are_rejected():
    with pytest.raises(ValueError):
        load_settings({"global": {"api_tokn": "typo"}})


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings_file(str(tmp_path / "missing.yaml"))


def test_validate_settings_flags_errors():
    report = validate_settings(
        GlobalSettings(
            api_token="ORG123",
            connection_timeout="-5",
            check_policies="sometimes",
            override_proxy_settings=True,
            proxy_port="http",
        ),
        JobSettings(modules_to_include="core(", module_tokens="core=T1\nbroken-line"),
    )
    codes = {issue["code"] for issue in report["issues"]}
    assert report["ok"] is False
    assert report["status"] == "FAIL"
    assert {
        "CONNECTION_TIMEOUT_INVALID",
        "CHECK_POLICIES_UNKNOWN",
        "PROXY_HOST_MISSING",
        "PROXY_PORT_INVALID",
        "MODULE_PATTERN_INVALID",
        "MODULE_TOKEN_LINE_IGNORED",
    } <= codes


def test_validate_settings_ok_with_warning_for_missing_token():
    report = validate_settings(GlobalSettings(connection_timeout="60"), JobSettings())
    assert report["ok"] is True
    assert report["status"] == "WARN"
    assert report["warning_count"] == 1
