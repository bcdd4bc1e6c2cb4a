from __future__ import annotations

import logging

from ossgate.integrations.compliance.types import InventoryUpdateResult


def log_update_result(result: InventoryUpdateResult, run_logger: logging.Logger) -> None:
    # Operators parse these lines; keep wording and order stable.
    run_logger.info("Update results:")
    run_logger.info("Organization: %s", result.organization)
    run_logger.info("%d Newly created projects:", len(result.created_projects))
    run_logger.info("%s", ",".join(result.created_projects))
    run_logger.info("%d existing projects were updated:", len(result.updated_projects))
    run_logger.info("%s", ",".join(result.updated_projects))
