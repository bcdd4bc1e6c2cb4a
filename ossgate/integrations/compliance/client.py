from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Sequence, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ossgate.integrations.compliance.proxy import ProxySettings
from ossgate.integrations.compliance.types import (
    STATUS_SUCCESS,
    ComplianceVerdict,
    InventoryUpdateResult,
    ResultEnvelope,
)
from ossgate.inventory.types import ProjectInfo
from ossgate.settings.models import EffectiveConfig

logger = logging.getLogger(__name__)

AGENT_TYPE = "ossgate-ci"
AGENT_VERSION = "2.2.7"
DEFAULT_SERVICE_URL = "https://saas.whitesourcesoftware.com/agent"
API_ROUTE = "agent"

REQUEST_CHECK_POLICY_COMPLIANCE = "CHECK_POLICY_COMPLIANCE"
REQUEST_UPDATE = "UPDATE"

ResultT = TypeVar("ResultT", bound=BaseModel)


class ComplianceServiceError(RuntimeError):
    """Base compliance service error."""


class ComplianceServiceTimeout(ComplianceServiceError):
    """Raised when a service call exceeds the connection timeout."""


class ComplianceServiceUnavailable(ComplianceServiceError):
    """Raised for transport/server errors from the compliance service."""


def normalize_service_url(url: Optional[str]) -> str:
    base = str(url or "").strip()
    if not base:
        return DEFAULT_SERVICE_URL
    if not base.endswith("/"):
        base += "/"
    return base + API_ROUTE


class ComplianceServiceClient:
    def __init__(
        self,
        service_url: str,
        *,
        timeout_seconds: int,
        proxy: Optional[ProxySettings] = None,
        agent_type: str = AGENT_TYPE,
        agent_version: str = AGENT_VERSION,
        session: Optional[requests.Session] = None,
    ):
        self.service_url = service_url
        self.timeout_seconds = timeout_seconds
        self.agent_type = agent_type
        self.agent_version = agent_version
        self.proxy: Optional[ProxySettings] = None
        self._session = session if session is not None else requests.Session()
        # Proxies come only from the resolver, never from the process environment.
        self._session.trust_env = False
        self._closed = False
        if proxy is not None:
            self.set_proxy(proxy)

    def __enter__(self) -> "ComplianceServiceClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    @property
    def closed(self) -> bool:
        return self._closed

    def set_proxy(self, proxy: ProxySettings) -> None:
        self.proxy = proxy
        self._session.proxies.clear()
        self._session.proxies.update(proxy.as_requests_proxies())

    def shutdown(self) -> None:
        """Release pooled connections. Calling it again is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._session.close()

    def check_policy_compliance(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Sequence[ProjectInfo],
        check_all_libraries: bool,
    ) -> ComplianceVerdict:
        form = self._base_form(REQUEST_CHECK_POLICY_COMPLIANCE, org_token, product, product_version, projects)
        form["forceCheckAllDependencies"] = "true" if check_all_libraries else "false"
        return self._service(REQUEST_CHECK_POLICY_COMPLIANCE, form, ComplianceVerdict)

    def update(
        self,
        org_token: str,
        requester_email: Optional[str],
        product: Optional[str],
        product_version: Optional[str],
        projects: Sequence[ProjectInfo],
    ) -> InventoryUpdateResult:
        form = self._base_form(REQUEST_UPDATE, org_token, product, product_version, projects)
        if requester_email:
            form["requesterEmail"] = requester_email
        return self._service(REQUEST_UPDATE, form, InventoryUpdateResult)

    def _base_form(
        self,
        request_type: str,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Sequence[ProjectInfo],
    ) -> Dict[str, str]:
        diff = [p.model_dump(mode="json", by_alias=True, exclude_none=True) for p in projects]
        return {
            "type": request_type,
            "agent": self.agent_type,
            "agentVersion": self.agent_version,
            "token": org_token,
            "product": product or "",
            "productVersion": product_version or "",
            "timeStamp": str(int(time.time() * 1000)),
            "diff": json.dumps(diff, separators=(",", ":"), ensure_ascii=False),
        }

    def _post(self, request_type: str, form: Dict[str, str]) -> requests.Response:
        if self._closed:
            raise ComplianceServiceError("Compliance service client is already shut down")
        try:
            return self._session.post(
                self.service_url,
                data=form,
                headers={"Accept": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise ComplianceServiceTimeout(
                f"Compliance service {request_type} timed out after {self.timeout_seconds}s"
            ) from exc
        except requests.RequestException as exc:
            raise ComplianceServiceUnavailable(f"Compliance service {request_type} request failed: {exc}") from exc

    def _service(self, request_type: str, form: Dict[str, str], result_type: Type[ResultT]) -> ResultT:
        logger.debug("Sending %s request to %s", request_type, self.service_url)
        resp = self._post(request_type, form)
        if resp.status_code < 200 or resp.status_code >= 300:
            raise ComplianceServiceUnavailable(
                f"Compliance service {request_type} failed with status {resp.status_code}"
            )
        try:
            envelope = ResultEnvelope.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ComplianceServiceError(f"Compliance service {request_type} returned an invalid response") from exc

        if envelope.status != STATUS_SUCCESS:
            raise ComplianceServiceError(
                f"Compliance service {request_type} was rejected: {envelope.message or 'no message'}"
            )

        payload: Any = {}
        if envelope.data:
            try:
                payload = json.loads(envelope.data)
            except ValueError as exc:
                raise ComplianceServiceError(f"Compliance service {request_type} returned malformed data") from exc
        try:
            return result_type.model_validate(payload or {})
        except ValidationError as exc:
            raise ComplianceServiceError(f"Compliance service {request_type} returned unexpected data") from exc


def create_service_client(config: EffectiveConfig, session: Optional[requests.Session] = None) -> ComplianceServiceClient:
    return ComplianceServiceClient(
        normalize_service_url(config.service_url),
        timeout_seconds=config.connection_timeout,
        proxy=config.proxy,
        session=session,
    )
