# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/job/waiter.py
from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from ..k8s.client import ClusterClient
from ..observers.dispatcher import EventBus
from ..observers.events import (
    JobPolled,
    WaiterErrored,
    WaiterFailed,
    WaiterStarted,
    WaiterSucceeded,
    WaiterTimedOut,
)
from .outcome import JobOutcome, OutcomeStatus, SubmittedJob

log = logging.getLogger("kjob")

DEFAULT_POLL_INTERVAL = 3.0


def classify_status(name: str, status: Dict[str, Any]) -> Optional[JobOutcome]:
    """
    Map a Job .status to a terminal outcome, or None while it is still running.

    The API omits .active when it is zero, so a status with neither an active
    count nor conditions has simply not been reported yet.
    """
    active = status.get("active")
    conditions = status.get("conditions") or []
    if active:
        return None
    if active is None and not conditions:
        return None

    for condition in conditions:
        if condition.get("type") == "Failed" and condition.get("status", "True") != "False":
            reason = condition.get("reason") or condition.get("message") or "unknown"
            return JobOutcome.failed(name, reason)
    return JobOutcome.succeeded(name)


class JobWaiter:
    """
    Polls a submitted job until it finishes, racing a deadline.

    A timed out wait abandons the poll task. Status requests run on a thread
    pool owned by the wait and released without joining. A request already in
    flight finishes in its thread and its result is dropped; the caller does
    not wait for it.
    """

    def __init__(
        self,
        client: ClusterClient,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        bus: Optional[EventBus] = None,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.bus = bus or EventBus()

    async def wait(
        self,
        job: SubmittedJob,
        timeout: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> JobOutcome:
        """
        Wait for job to reach a terminal state.

        timeout of None or 0 waits until the job finishes. Setting cancel
        ends the wait early with a TIMED_OUT outcome.
        """
        log.info("Waiting for running job...")
        self.bus.publish(WaiterStarted, name=job.name, namespace=job.namespace, timeout_s=timeout)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"kjob-poll-{job.name}")
        poll = asyncio.create_task(self._poll_until_terminal(job, executor), name=f"poll-{job.name}")
        racers = {poll}
        cancelled = None
        if cancel is not None:
            cancelled = asyncio.create_task(cancel.wait(), name=f"cancel-{job.name}")
            racers.add(cancelled)

        try:
            done, _ = await asyncio.wait(
                racers,
                timeout=timeout or None,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancelled is not None:
                cancelled.cancel()
            if not poll.done():
                poll.cancel()
            executor.shutdown(wait=False, cancel_futures=True)

        if poll in done:
            outcome = poll.result()
        else:
            outcome = JobOutcome.timed_out(job.name, timeout)

        self._report(outcome)
        return outcome

    async def _poll_until_terminal(self, job: SubmittedJob, executor: ThreadPoolExecutor) -> JobOutcome:
        loop = asyncio.get_running_loop()
        attempt = 0
        while True:
            await asyncio.sleep(self.poll_interval)
            attempt += 1
            try:
                current = await loop.run_in_executor(executor, self.client.get_job, job.namespace, job.name)
                status = current.get("status") or {}
            except Exception as e:
                # transport, API or payload failure: the wait ends as errored
                return JobOutcome.errored(job.name, e)

            self.bus.publish(JobPolled, name=job.name, active=int(status.get("active") or 0), attempt=attempt)
            outcome = classify_status(job.name, status)
            if outcome is not None:
                return outcome

    def _report(self, outcome: JobOutcome) -> None:
        name = outcome.name
        if outcome.status is OutcomeStatus.SUCCEEDED:
            log.info("Job is succeeded")
            self.bus.publish(WaiterSucceeded, name=name)
        elif outcome.status is OutcomeStatus.FAILED:
            log.error(f"Job is failed: {outcome.reason}")
            self.bus.publish(WaiterFailed, name=name, reason=outcome.reason or "unknown")
        elif outcome.status is OutcomeStatus.TIMED_OUT:
            log.error(f"Process timeout while waiting for job {name}")
            self.bus.publish(WaiterTimedOut, name=name, timeout_s=outcome.timeout)
        else:
            log.error(f"Polling job {name} failed: {outcome.reason}")
            self.bus.publish(WaiterErrored, name=name, error=outcome.reason or "")
