from __future__ import annotations

import json
import sys
from pathlib import Path
from textwrap import dedent

from ossgate.cli import build_parser, main
from ossgate.integrations.compliance.client import ComplianceServiceUnavailable
from ossgate.integrations.compliance.types import (
    ComplianceVerdict,
    PolicyCheckResourceNode,
    PolicyInfo,
    ResourceInfo,
)
from tests.fakes import FakeComplianceClient


def _write(path: Path, content: str) -> None:
    path.write_text(dedent(content).strip() + "\n", encoding="utf-8")


def _workspace(tmp_path: Path) -> Path:
    workspace = tmp_path / "workspace"
    (workspace / "lib").mkdir(parents=True)
    (workspace / "lib" / "commons-text-1.9.jar").write_bytes(b"jar-bytes")
    return workspace


def _settings(tmp_path: Path, fail_on_error: bool = False, token: str = "ORG123") -> Path:
    path = tmp_path / "ossgate.yaml"
    _write(
        path,
        f"""
        global:
          api_token: "{token}"
          check_policies: enableAll
          fail_on_error: {str(fail_on_error).lower()}
        job:
          product: acme
        """,
    )
    return path


def _use_client(monkeypatch, client):
    import ossgate.pipeline.orchestrator as orchestrator_mod

    monkeypatch.setattr(orchestrator_mod, "create_service_client", lambda config: client)


def _publish_argv(config: Path, workspace: Path, *extra: str):
    return [
        "ossgate",
        "publish",
        "--config",
        str(config),
        "--workspace",
        str(workspace),
        "--project-name",
        "acme-job",
        "--build-number",
        "7",
        "--format",
        "json",
        *extra,
    ]


def test_cli_parser_includes_commands():
    parser = build_parser()
    assert parser.parse_args(["publish"]).cmd == "publish"
    assert parser.parse_args(["validate-config"]).cmd == "validate-config"


def test_publish_rejection_exits_nonzero_with_report(tmp_path, monkeypatch, capsys):
    verdict = ComplianceVerdict(
        organization="Acme",
        new_projects={
            "acme-job": PolicyCheckResourceNode(
                resource=ResourceInfo(display_name="acme-job"),
                children=[
                    PolicyCheckResourceNode(
                        resource=ResourceInfo(display_name="commons-text-1.9.jar"),
                        policy=PolicyInfo(display_name="Text4Shell", action_type="Reject"),
                    )
                ],
            )
        },
    )
    client = FakeComplianceClient(verdict=verdict)
    _use_client(monkeypatch, client)
    workspace = _workspace(tmp_path)
    monkeypatch.setattr(sys, "argv", _publish_argv(_settings(tmp_path), workspace))

    rc = main()

    assert rc == 1
    output = json.loads(capsys.readouterr().out)
    assert output["outcome"] == "MARK_UNSTABLE_OR_FAILED"
    assert output["fails_build"] is True
    assert Path(output["report_path"]).exists()
    assert client.update_calls == []
    assert client.check_calls[0]["product"] == "acme"


def test_publish_service_error_without_fail_on_error_exits_zero(tmp_path, monkeypatch, capsys):
    client = FakeComplianceClient(check_error=ComplianceServiceUnavailable("service down"))
    _use_client(monkeypatch, client)
    monkeypatch.setattr(sys, "argv", _publish_argv(_settings(tmp_path), _workspace(tmp_path)))

    rc = main()

    assert rc == 0
    output = json.loads(capsys.readouterr().out)
    assert output["outcome"] == "CONTINUE_SUCCESS"
    assert client.shutdown_calls == 1


def test_publish_service_error_with_fail_on_error_exits_one(tmp_path, monkeypatch, capsys):
    _use_client(monkeypatch, FakeComplianceClient(check_error=ComplianceServiceUnavailable("service down")))
    monkeypatch.setattr(
        sys,
        "argv",
        _publish_argv(_settings(tmp_path, fail_on_error=True), _workspace(tmp_path)),
    )

    rc = main()

    assert rc == 1
    assert json.loads(capsys.readouterr().out)["outcome"] == "CONDITIONALLY_FAILED"


def test_publish_skips_failed_builds(tmp_path, monkeypatch, capsys):
    client = FakeComplianceClient()
    _use_client(monkeypatch, client)
    monkeypatch.setattr(
        sys,
        "argv",
        _publish_argv(_settings(tmp_path), _workspace(tmp_path), "--build-result", "FAILURE"),
    )

    assert main() == 0
    assert client.check_calls == []


def test_publish_missing_config_exits_two(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", _publish_argv(tmp_path / "missing.yaml", tmp_path))
    assert main() == 2


def test_validate_config_reports_errors(tmp_path, monkeypatch, capsys):
    path = tmp_path / "ossgate.yaml"
    _write(
        path,
        """
        global:
          api_token: ORG123
          connection_timeout: "-5"
        """,
    )
    monkeypatch.setattr(sys, "argv", ["ossgate", "validate-config", "--config", str(path), "--format", "json"])

    rc = main()

    assert rc == 1
    report = json.loads(capsys.readouterr().out)
    assert report["status"] == "FAIL"
    assert report["issues"][0]["code"] == "CONNECTION_TIMEOUT_INVALID"


def test_publish_multi_module_without_manifest_exits_two(tmp_path, monkeypatch, capsys):
    client = FakeComplianceClient()
    _use_client(monkeypatch, client)
    monkeypatch.setattr(
        sys,
        "argv",
        _publish_argv(_settings(tmp_path), _workspace(tmp_path), "--build-kind", "multi_module"),
    )

    assert main() == 2
    assert "--modules is required for multi_module builds" in capsys.readouterr().err
    assert client.check_calls == []
    assert client.update_calls == []
