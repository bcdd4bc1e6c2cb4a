from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from ossgate.config import GLOBAL_ENV_OVERRIDES
from ossgate.settings.models import GlobalSettings, JobSettings


def _load_yaml_file(path: str) -> Dict[str, Any]:
    loaded_path = Path(path)
    if not loaded_path.exists():
        raise FileNotFoundError(f"file not found: {path}")
    with loaded_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a YAML object at top-level in {path}")
    return data


def _section(data: Mapping[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"`{name}` must be a mapping")
    return dict(value)


def apply_env_overrides(values: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    merged = dict(values)
    for field_name, env_name in GLOBAL_ENV_OVERRIDES.items():
        raw = env.get(env_name)
        if raw is not None and str(raw).strip():
            merged[field_name] = str(raw).strip()
    return merged


def load_settings(
    data: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[GlobalSettings, JobSettings]:
    global_values = apply_env_overrides(_section(data, "global"), environ)
    try:
        return (
            GlobalSettings.model_validate(global_values),
            JobSettings.model_validate(_section(data, "job")),
        )
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


def load_settings_file(
    path: str,
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[GlobalSettings, JobSettings]:
    return load_settings(_load_yaml_file(path), environ)
