from ossgate.policy.mode import (
    ENABLE_ALL,
    ENABLE_NEW,
    GLOBAL,
    PolicyCheckMode,
    PolicyDecision,
    resolve_policy_check_mode,
)

__all__ = [
    "ENABLE_ALL",
    "ENABLE_NEW",
    "GLOBAL",
    "PolicyCheckMode",
    "PolicyDecision",
    "resolve_policy_check_mode",
]
