"""
Job-over-global merging of pipeline settings.
"""
from __future__ import annotations

from typing import Optional

from ossgate.integrations.compliance.proxy import HostProxyConfiguration, resolve_proxy_settings
from ossgate.policy.mode import resolve_policy_check_mode
from ossgate.settings.models import EffectiveConfig, GlobalSettings, JobSettings

DEFAULT_TIMEOUT = 60


def _first_non_blank(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def resolve_api_token(job: JobSettings, global_settings: GlobalSettings) -> Optional[str]:
    return _first_non_blank(job.api_token, global_settings.api_token)


def resolve_connection_timeout(raw: Optional[str], default: int = DEFAULT_TIMEOUT) -> int:
    """
    Positive integer seconds; anything else falls back to the default.
    """
    text = str(raw or "").strip()
    try:
        value = int(text)
    except ValueError:
        return default
    return value if value > 0 else default


def resolve_effective_config(
    job: JobSettings,
    global_settings: GlobalSettings,
    host_proxy: Optional[HostProxyConfiguration] = None,
) -> Optional[EffectiveConfig]:
    """
    Returns None when neither the job nor the organization has an API token.
    """
    api_token = resolve_api_token(job, global_settings)
    if not api_token:
        return None

    decision = resolve_policy_check_mode(job.check_policies, global_settings.check_policies)
    return EffectiveConfig(
        api_token=api_token,
        service_url=global_settings.service_url,
        connection_timeout=resolve_connection_timeout(global_settings.connection_timeout),
        policy_mode=decision.mode,
        check_all_libraries=decision.check_all_libraries,
        fail_on_error=bool(global_settings.fail_on_error),
        proxy=resolve_proxy_settings(global_settings, host_proxy),
        product=job.product,
        product_version=job.product_version,
        requester_email=job.requester_email,
    )
