from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional

from ossgate.policy.mode import CHECK_POLICIES_VALUES
from ossgate.settings.models import GlobalSettings, JobSettings


@dataclass
class SettingsIssue:
    severity: Literal["ERROR", "WARN"]
    code: str
    message: str
    location: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload = {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
        }
        if self.location:
            payload["location"] = self.location
        return payload


def _is_positive_int(raw: str) -> bool:
    try:
        return int(raw) > 0
    except ValueError:
        return False


def _check_regex(value: Optional[str], location: str, issues: List[SettingsIssue]) -> None:
    for pattern in str(value or "").split():
        try:
            re.compile(pattern)
        except re.error as exc:
            issues.append(
                SettingsIssue(
                    severity="ERROR",
                    code="MODULE_PATTERN_INVALID",
                    message=f"invalid module pattern `{pattern}`: {exc}",
                    location=location,
                )
            )


def validate_settings(global_settings: GlobalSettings, job: JobSettings) -> Dict[str, Any]:
    issues: List[SettingsIssue] = []

    if global_settings.connection_timeout is not None and not _is_positive_int(global_settings.connection_timeout):
        issues.append(
            SettingsIssue(
                severity="ERROR",
                code="CONNECTION_TIMEOUT_INVALID",
                message="connection_timeout must be a positive integer (seconds).",
                location="global.connection_timeout",
            )
        )

    for location, value in (
        ("global.check_policies", global_settings.check_policies),
        ("job.check_policies", job.check_policies),
    ):
        if value is not None and value not in CHECK_POLICIES_VALUES:
            issues.append(
                SettingsIssue(
                    severity="ERROR",
                    code="CHECK_POLICIES_UNKNOWN",
                    message=f"unknown check_policies value `{value}` (allowed: {', '.join(CHECK_POLICIES_VALUES)})",
                    location=location,
                )
            )

    if global_settings.override_proxy_settings:
        if not global_settings.proxy_host:
            issues.append(
                SettingsIssue(
                    severity="ERROR",
                    code="PROXY_HOST_MISSING",
                    message="proxy override is enabled but proxy_host is empty.",
                    location="global.proxy_host",
                )
            )
        if global_settings.proxy_port is not None and not global_settings.proxy_port.isdigit():
            issues.append(
                SettingsIssue(
                    severity="ERROR",
                    code="PROXY_PORT_INVALID",
                    message="proxy_port must be a number.",
                    location="global.proxy_port",
                )
            )

    if not global_settings.api_token and not job.api_token:
        issues.append(
            SettingsIssue(
                severity="WARN",
                code="API_TOKEN_MISSING",
                message="no API token configured; runs will skip the update.",
                location="global.api_token",
            )
        )

    _check_regex(job.modules_to_include, "job.modules_to_include", issues)
    _check_regex(job.modules_to_exclude, "job.modules_to_exclude", issues)

    if job.module_tokens:
        for idx, line in enumerate(job.module_tokens.splitlines()):
            if line.strip() and "=" not in line:
                issues.append(
                    SettingsIssue(
                        severity="WARN",
                        code="MODULE_TOKEN_LINE_IGNORED",
                        message=f"module token line `{line.strip()}` is not `artifactId=token` and is ignored.",
                        location=f"job.module_tokens[{idx}]",
                    )
                )

    errors = [issue.as_dict() for issue in issues if issue.severity == "ERROR"]
    warnings = [issue.as_dict() for issue in issues if issue.severity == "WARN"]
    status = "FAIL" if errors else ("WARN" if warnings else "OK")
    return {
        "status": status,
        "ok": not errors,
        "error_count": len(errors),
        "warning_count": len(warnings),
        "issues": [issue.as_dict() for issue in issues],
    }
