from __future__ import annotations

from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from ossgate.inventory.extractors import ModuleBuild


def load_module_manifest(path: str) -> List[ModuleBuild]:
    """
    Load the resolved module list of a multi-module build.
    Accepts YAML or JSON: either a list of modules or {"modules": [...]}.
    """
    manifest_path = Path(path)
    if not manifest_path.exists():
        raise FileNotFoundError(f"file not found: {path}")
    with manifest_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or []
    if isinstance(data, dict):
        data = data.get("modules") or []
    if not isinstance(data, list):
        raise ValueError(f"expected a module list in {path}")
    try:
        return [ModuleBuild.model_validate(item) for item in data]
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
