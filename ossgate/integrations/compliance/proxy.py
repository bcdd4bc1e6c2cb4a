"""
Outbound proxy resolution for the compliance service client.

Two origins are supported: the explicit override in global settings, or the
ambient proxy declared by the host environment. A single flag on the global
settings selects between them.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Mapping, Optional
from urllib.parse import quote, unquote, urlsplit

if TYPE_CHECKING:
    from ossgate.settings.models import GlobalSettings


AMBIENT_PROXY_VARIABLES = ("HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy")


@dataclass(frozen=True)
class ProxySettings:
    host: Optional[str] = None
    port: int = 0
    username: Optional[str] = None
    password: Optional[str] = None

    def proxy_url(self) -> Optional[str]:
        if not self.host:
            return None
        auth = ""
        if self.username:
            auth = quote(self.username, safe="")
            if self.password:
                auth += ":" + quote(self.password, safe="")
            auth += "@"
        port = f":{self.port}" if self.port and self.port > 0 else ""
        return f"http://{auth}{self.host}{port}"

    def as_requests_proxies(self) -> Dict[str, str]:
        url = self.proxy_url()
        if url is None:
            return {}
        return {"http": url, "https": url}


@dataclass(frozen=True)
class HostProxyConfiguration:
    """Proxy declared by the host environment (the CI agent)."""

    name: Optional[str] = None
    port: int = 0
    user_name: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> Optional["HostProxyConfiguration"]:
        env = os.environ if environ is None else environ
        raw = ""
        for name in AMBIENT_PROXY_VARIABLES:
            raw = str(env.get(name) or "").strip()
            if raw:
                break
        if not raw:
            return None
        if "://" not in raw:
            raw = "http://" + raw
        try:
            parsed = urlsplit(raw)
            port = parsed.port or 0
        except ValueError:
            return cls(name=raw)
        return cls(
            name=parsed.hostname or raw,
            port=port,
            user_name=unquote(parsed.username) if parsed.username else None,
            password=unquote(parsed.password) if parsed.password else None,
        )


def strip_scheme(host: Optional[str]) -> Optional[str]:
    """
    Keep only the host component when the value is a URL.
    Values that do not parse as a URL are returned unchanged.
    """
    if not host or "://" not in host:
        return host
    try:
        hostname = urlsplit(host).hostname
    except ValueError:
        return host
    return hostname if hostname is not None else host


def _parse_port(raw: Optional[str]) -> int:
    text = str(raw or "").strip()
    # Malformed ports are reported by settings validation; treat them as unset here.
    if not text.isdigit():
        return 0
    return int(text)


def is_proxy_configured(settings: "GlobalSettings", host_proxy: Optional[HostProxyConfiguration]) -> bool:
    return bool(settings.override_proxy_settings) or host_proxy is not None


def resolve_proxy_settings(
    settings: "GlobalSettings",
    host_proxy: Optional[HostProxyConfiguration],
) -> Optional[ProxySettings]:
    """
    Returns the effective proxy, or None when no proxy is configured at all.
    """
    if not is_proxy_configured(settings, host_proxy):
        return None

    if settings.override_proxy_settings:
        host = settings.proxy_host
        port = _parse_port(settings.proxy_port)
        username = settings.proxy_username
        password = settings.proxy_password
    else:
        host = host_proxy.name
        port = int(host_proxy.port or 0)
        username = host_proxy.user_name
        password = host_proxy.password

    return ProxySettings(host=strip_scheme(host), port=port, username=username, password=password)
