# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/template/models.py
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..errors import ParseError

DEFAULT_NAMESPACE = "default"


def containers_of(manifest: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return spec.template.spec.containers of a Job manifest (the live list)."""
    try:
        containers = manifest["spec"]["template"]["spec"]["containers"]
    except (KeyError, TypeError):
        raise ParseError("Template has no spec.template.spec.containers") from None
    if not isinstance(containers, list):
        raise ParseError("spec.template.spec.containers must be a list")
    return containers


@dataclass(frozen=True)
class JobTemplate:
    """
    A parsed batch/v1 Job manifest.

    The wrapped mapping is never handed out directly; callers mutate the
    result of copy().
    """

    _manifest: Dict[str, Any] = field(repr=False)

    @classmethod
    def from_yaml(cls, text: str | bytes) -> "JobTemplate":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParseError(f"Template is not valid YAML: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "JobTemplate":
        try:
            text = Path(path).read_text()
        except OSError as e:
            raise ParseError(f"Could not read template {path}: {e}") from e
        return cls.from_yaml(text)

    @classmethod
    def from_dict(cls, data: Any) -> "JobTemplate":
        if not isinstance(data, dict):
            raise ParseError("Template must be a mapping")
        kind = data.get("kind")
        if kind is not None and kind != "Job":
            raise ParseError(f"Template kind must be Job, got {kind}")
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict) or not metadata.get("name"):
            raise ParseError("Template is missing metadata.name")
        for c in containers_of(data):
            if not isinstance(c, dict) or not c.get("name"):
                raise ParseError("Every container in the template needs a name")
        return cls(copy.deepcopy(data))

    @property
    def name(self) -> str:
        return self._manifest["metadata"]["name"]

    @property
    def namespace(self) -> str:
        return self._manifest["metadata"].get("namespace") or DEFAULT_NAMESPACE

    @property
    def container_names(self) -> List[str]:
        return [c["name"] for c in containers_of(self._manifest)]

    def copy(self) -> Dict[str, Any]:
        return copy.deepcopy(self._manifest)
