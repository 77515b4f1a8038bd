# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/config/models.py

import re
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: Union[str, int, float, None]) -> float:
    """
    Convert "90", "90s", "10m" or "1h30m" to seconds.
    None and empty strings mean 0 (no deadline).
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    text = value.strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        pass

    pos = 0
    total = 0.0
    for m in _DURATION_PART.finditer(text):
        if m.start() != pos:
            break
        total += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        pos = m.end()
    if pos != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return total


class RunConfig(BaseModel):
    """Parameters for one job run."""

    # Cluster access
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    in_cluster: bool = False

    # What to run
    template: str
    container: str
    command: str = ""

    # Waiting
    timeout: float = Field(default=0.0, ge=0)          # seconds, 0 = wait forever
    poll_interval: float = Field(default=3.0, gt=0)

    @field_validator("template", "container")
    @classmethod
    def _required(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def _duration(cls, v):
        return parse_duration(v)

    @model_validator(mode="after")
    def _cluster_access(self) -> "RunConfig":
        if not self.in_cluster and not self.kubeconfig:
            raise ValueError("kubeconfig is required unless in_cluster is set")
        return self
