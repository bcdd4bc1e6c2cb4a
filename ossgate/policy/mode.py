"""
Policy check mode resolution.

Job settings may override the organization default; "global" (or an empty
value) at job level defers to the organization setting.
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional

GLOBAL = "global"
ENABLE_NEW = "enableNew"
ENABLE_ALL = "enableAll"
DISABLE = "disable"

CHECK_POLICIES_VALUES = (GLOBAL, ENABLE_NEW, ENABLE_ALL, DISABLE)


class PolicyCheckMode(str, Enum):
    DISABLED = "DISABLED"
    CHECK_NEW_ONLY = "CHECK_NEW_ONLY"
    CHECK_ALL = "CHECK_ALL"


class PolicyDecision(NamedTuple):
    mode: PolicyCheckMode
    check_all_libraries: bool

    @property
    def should_check(self) -> bool:
        return self.mode is not PolicyCheckMode.DISABLED


def _clean(value: Optional[str]) -> str:
    return str(value or "").strip()


def resolve_policy_check_mode(job_mode: Optional[str], global_mode: Optional[str]) -> PolicyDecision:
    winning = _clean(job_mode)
    if not winning or winning == GLOBAL:
        winning = _clean(global_mode)

    if winning == ENABLE_ALL:
        return PolicyDecision(PolicyCheckMode.CHECK_ALL, True)
    if winning == ENABLE_NEW:
        return PolicyDecision(PolicyCheckMode.CHECK_NEW_ONLY, False)
    return PolicyDecision(PolicyCheckMode.DISABLED, False)
