from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ossgate.integrations.compliance.proxy import ProxySettings
from ossgate.policy.mode import PolicyCheckMode


def _strip_optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


class GlobalSettings(BaseModel):
    """
    Organization-wide settings. Read-only for the duration of a run.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    service_url: Optional[str] = None
    api_token: Optional[str] = None
    check_policies: Optional[str] = None
    fail_on_error: bool = False
    override_proxy_settings: bool = False
    proxy_host: Optional[str] = None
    proxy_port: Optional[str] = None
    proxy_username: Optional[str] = None
    proxy_password: Optional[str] = None
    # Kept as text; validated as a positive integer when resolved
    connection_timeout: Optional[str] = None

    @field_validator(
        "service_url",
        "api_token",
        "check_policies",
        "proxy_host",
        "proxy_port",
        "proxy_username",
        "connection_timeout",
        mode="before",
    )
    @classmethod
    def _strip_strings(cls, value: Any) -> Optional[str]:
        return _strip_optional(value)

    @field_validator("proxy_password", mode="before")
    @classmethod
    def _password_as_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value) or None


class JobSettings(BaseModel):
    """
    Per-job settings. Non-blank values take precedence over GlobalSettings.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    check_policies: Optional[str] = None
    api_token: Optional[str] = None
    product: Optional[str] = None
    product_version: Optional[str] = None
    project_token: Optional[str] = None
    lib_includes: Optional[str] = None
    lib_excludes: Optional[str] = None
    module_project_token: Optional[str] = None
    requester_email: Optional[str] = None
    module_tokens: Optional[str] = None
    modules_to_include: Optional[str] = None
    modules_to_exclude: Optional[str] = None
    ignore_pom_modules: bool = False

    @field_validator(
        "check_policies",
        "api_token",
        "product",
        "product_version",
        "project_token",
        "lib_includes",
        "lib_excludes",
        "module_project_token",
        "requester_email",
        "modules_to_include",
        "modules_to_exclude",
        mode="before",
    )
    @classmethod
    def _strip_strings(cls, value: Any) -> Optional[str]:
        return _strip_optional(value)

    @field_validator("module_tokens", mode="before")
    @classmethod
    def _keep_lines(cls, value: Any) -> Optional[str]:
        # Multi-line "artifactId=token" mapping; only trim the outer whitespace.
        return _strip_optional(value)


@dataclass(frozen=True)
class EffectiveConfig:
    """Scalar settings for one pipeline run after job-over-global merging."""

    api_token: str
    service_url: Optional[str]
    connection_timeout: int
    policy_mode: PolicyCheckMode
    check_all_libraries: bool
    fail_on_error: bool
    proxy: Optional[ProxySettings]
    product: Optional[str] = None
    product_version: Optional[str] = None
    requester_email: Optional[str] = None

    @property
    def should_check_policies(self) -> bool:
        return self.policy_mode is not PolicyCheckMode.DISABLED
