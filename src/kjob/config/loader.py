# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/config/loader.py
from __future__ import annotations

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..errors import ConfigError
from .models import RunConfig


def read_config_file(path: str | Path) -> Dict[str, Any]:
    raw = Path(path).read_text()

    # expand environment variables like ${KUBECONFIG}
    expanded = os.path.expandvars(raw)

    try:
        data = yaml.safe_load(expanded) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {path} is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def build_config(values: Dict[str, Any]) -> RunConfig:
    """Validate raw values, dropping unset (None) entries so defaults apply."""
    cleaned = {k: v for k, v in values.items() if v is not None}
    try:
        return RunConfig.model_validate(cleaned)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid run configuration: {problems}") from e


def load_config(path: Optional[str | Path] = None, **overrides: Any) -> RunConfig:
    """
    Load the run configuration from an optional YAML file.
    Non-None keyword overrides (typically CLI flags) win over file values.
    """
    data: Dict[str, Any] = read_config_file(path) if path else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return build_config(data)
