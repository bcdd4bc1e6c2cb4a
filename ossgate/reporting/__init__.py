from __future__ import annotations

from ossgate.reporting.policy_report import (
    PolicyCheckReportGenerator,
    PolicyReportGenerator,
    build_policy_report,
)
from ossgate.reporting.update_log import log_update_result
from ossgate.reporting.write_report import write_json_report_atomic

__all__ = [
    "PolicyCheckReportGenerator",
    "PolicyReportGenerator",
    "build_policy_report",
    "log_update_result",
    "write_json_report_atomic",
]
