from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class BuildOutcome(str, Enum):
    CONTINUE_SUCCESS = "CONTINUE_SUCCESS"
    # Policy rejection or misconfigured build kind; independent of fail-on-error
    MARK_UNSTABLE_OR_FAILED = "MARK_UNSTABLE_OR_FAILED"
    # Service/infrastructure error with fail-on-error enabled
    CONDITIONALLY_FAILED = "CONDITIONALLY_FAILED"

    @property
    def fails_build(self) -> bool:
        return self is not BuildOutcome.CONTINUE_SUCCESS


class BuildKind(str, Enum):
    MULTI_MODULE = "multi_module"
    GENERIC = "generic"
    # Free-style jobs driving a multi-module build tool; not supported.
    FREESTYLE_MAVEN = "freestyle_maven"


SUPPORTED_BUILD_KINDS = (BuildKind.MULTI_MODULE, BuildKind.GENERIC)


def build_kind_value(kind: Union[BuildKind, str, None]) -> str:
    if isinstance(kind, BuildKind):
        return kind.value
    return str(kind or "").strip()


@dataclass(frozen=True)
class BuildContext:
    project_name: str
    build_number: str
    build_dir: Path


@dataclass(frozen=True)
class RunResult:
    outcome: BuildOutcome
    message: str = ""
    report_path: Optional[Path] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "fails_build": self.outcome.fails_build,
            "message": self.message,
            "report_path": self.report_path.as_posix() if self.report_path else None,
        }
