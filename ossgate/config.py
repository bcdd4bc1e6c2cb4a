import os
from dotenv import load_dotenv

# Load params from .env file
load_dotenv()

# Settings file consulted by the CLI when --config is not given
DEFAULT_CONFIG_PATH = os.getenv("OSSGATE_CONFIG", "ossgate.yaml")

# Logging
LOG_LEVEL = os.getenv("OSSGATE_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("OSSGATE_LOG_FORMAT", "text")

# Name of the logger that carries the per-run transcript
RUN_LOGGER_NAME = "ossgate.run"

# Report artifacts land under <build dir>/<REPORT_DIR_NAME>
REPORT_DIR_NAME = os.getenv("OSSGATE_REPORT_DIR_NAME", "ossgate")

# Environment overrides for global settings
GLOBAL_ENV_OVERRIDES = {
    "api_token": "OSSGATE_API_TOKEN",
    "service_url": "OSSGATE_SERVICE_URL",
    "check_policies": "OSSGATE_CHECK_POLICIES",
    "fail_on_error": "OSSGATE_FAIL_ON_ERROR",
    "connection_timeout": "OSSGATE_CONNECTION_TIMEOUT",
}


def _env_bool(name: str, default: bool) -> bool:
    raw = str(os.getenv(name, "true" if default else "false")).strip().lower()
    return raw in {"1", "true", "yes", "on"}


def is_report_generation_enabled() -> bool:
    """
    Controls writing of the policy check report artifact.
    Defaults to enabled.
    """
    return _env_bool("OSSGATE_REPORT_ENABLED", True)
