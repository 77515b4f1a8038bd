# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/job/submitter.py
from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import ClusterAPIError, SubmissionError
from ..k8s.client import ClusterClient
from ..template.models import DEFAULT_NAMESPACE
from .outcome import SubmittedJob

log = logging.getLogger("kjob")


class JobSubmitter:
    def __init__(self, client: ClusterClient):
        self.client = client

    def submit(self, manifest: Dict[str, Any]) -> SubmittedJob:
        metadata = manifest.get("metadata") or {}
        namespace = metadata.get("namespace") or DEFAULT_NAMESPACE
        name = metadata.get("name", "")

        log.info(f"Creating job {name} in namespace {namespace}")
        try:
            created = self.client.create_job(namespace, manifest)
        except ClusterAPIError as e:
            raise SubmissionError(f"Could not create job {name}: {e}") from e

        meta = created.get("metadata") or {}
        return SubmittedJob(
            namespace=meta.get("namespace") or namespace,
            name=meta.get("name") or name,
            manifest=created,
        )
