# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/job/builder.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..errors import ContainerNotFound
from ..template.models import containers_of

# populated by the API server; a template exported with kubectl carries them
_SERVER_METADATA = ("resourceVersion", "uid", "creationTimestamp", "selfLink", "managedFields")


def find_container_index(manifest: Dict[str, Any], container: str) -> int:
    containers = containers_of(manifest)
    for index, c in enumerate(containers):
        if c.get("name") == container:
            return index
    raise ContainerNotFound(container, [c.get("name", "") for c in containers])


def build_job_manifest(
    manifest: Dict[str, Any],
    container: str,
    args: Sequence[str],
    *,
    name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Inject the override args into the named container of a manifest copy.

    The manifest is mutated and returned; pass JobTemplate.copy(), never the
    template's own mapping.
    """
    index = find_container_index(manifest, container)
    override: List[str] = list(args)
    containers_of(manifest)[index]["args"] = override

    manifest.pop("status", None)
    metadata = manifest.setdefault("metadata", {})
    for key in _SERVER_METADATA:
        metadata.pop(key, None)
    if name:
        metadata["name"] = name
    return manifest
