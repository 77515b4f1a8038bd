# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/job/reaper.py
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ClusterAPIError, CleanupError, ResourceNotFound
from ..k8s.client import ClusterClient
from ..observers.dispatcher import EventBus
from ..observers.events import CleanupFinished, CleanupStarted
from .outcome import SubmittedJob

log = logging.getLogger("kjob")


class JobReaper:
    """
    Removes a job's pods, then the job itself.

    Pods go first: deleting a Job without a propagation policy orphans its
    pods. Not-found counts as already cleaned, so cleanup can be repeated.
    """

    def __init__(self, client: ClusterClient, *, bus: Optional[EventBus] = None):
        self.client = client
        self.bus = bus or EventBus()

    def cleanup(self, job: SubmittedJob) -> None:
        self.bus.publish(CleanupStarted, name=job.name, namespace=job.namespace, selector=job.selector)
        try:
            self._remove_pods(job)
            self._remove_job(job)
        except CleanupError as e:
            self.bus.publish(CleanupFinished, name=job.name, ok=False, error=str(e))
            raise
        self.bus.publish(CleanupFinished, name=job.name, ok=True)

    def _remove_pods(self, job: SubmittedJob) -> None:
        log.info(f"Remove related pods which labels is: {job.selector}")
        try:
            self.client.delete_pods(job.namespace, job.selector)
        except ResourceNotFound:
            log.debug(f"No pods left for {job.selector}")
        except ClusterAPIError as e:
            raise CleanupError(f"Could not remove pods of job {job.name}: {e}") from e

    def _remove_job(self, job: SubmittedJob) -> None:
        log.info(f"Removing the job: {job.name}")
        try:
            self.client.delete_job(job.namespace, job.name)
        except ResourceNotFound:
            log.debug(f"Job {job.name} already removed")
        except ClusterAPIError as e:
            raise CleanupError(f"Could not remove job {job.name}: {e}") from e
