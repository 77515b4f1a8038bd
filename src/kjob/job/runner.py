# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/job/runner.py
from __future__ import annotations

import asyncio
import logging
import shlex
import signal
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..config.models import RunConfig
from ..config.settings import FetchSettings
from ..errors import CleanupError, ParseError, SubmissionError
from ..k8s.client import ClusterClient, build_cluster_client
from ..observers.dispatcher import EventBus
from ..observers.events import JobSubmitted, RunSummary, SubmissionFailed
from ..template.fetch import fetch_template
from ..template.models import JobTemplate
from .builder import build_job_manifest
from .naming import generate_job_name
from .outcome import JobOutcome, SubmittedJob
from .reaper import JobReaper
from .submitter import JobSubmitter
from .waiter import DEFAULT_POLL_INTERVAL, JobWaiter

log = logging.getLogger("kjob")


def parse_command(command: str) -> List[str]:
    """Split a command line into argv using POSIX shell rules."""
    try:
        args = shlex.split(command)
    except ValueError as e:
        raise ParseError(f"Could not parse command {command!r}: {e}") from e
    log.info("Received args:")
    for arg in args:
        log.info(arg)
    return args


@dataclass
class RunReport:
    job: SubmittedJob
    outcome: Optional[JobOutcome] = None
    cleanup_error: Optional[CleanupError] = None

    @property
    def cleaned_up(self) -> bool:
        return self.cleanup_error is None

    def summary(self) -> str:
        outcome = str(self.outcome) if self.outcome else "unknown"
        cleanup = "ok" if self.cleaned_up else f"FAILED ({self.cleanup_error})"
        return f"job={self.job.namespace}/{self.job.name} outcome={outcome} cleanup={cleanup}"


class JobRun:
    """
    Everything one invocation needs: client, template, target container,
    override args and wait bounds. Nothing here is shared between runs.
    """

    def __init__(
        self,
        client: ClusterClient,
        template: JobTemplate,
        container: str,
        args: Sequence[str],
        *,
        timeout: Optional[float] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        bus: Optional[EventBus] = None,
    ):
        self.client = client
        self.template = template
        self.container = container
        self.args = list(args)
        self.timeout = timeout
        self.bus = bus or EventBus()

        self.submitter = JobSubmitter(client)
        self.waiter = JobWaiter(client, poll_interval=poll_interval, bus=self.bus)
        self.reaper = JobReaper(client, bus=self.bus)

    @classmethod
    def from_config(
        cls,
        cfg: RunConfig,
        *,
        client: Optional[ClusterClient] = None,
        bus: Optional[EventBus] = None,
        fetch_settings: Optional[FetchSettings] = None,
    ) -> "JobRun":
        client = client or build_cluster_client(
            kubeconfig=cfg.kubeconfig, context=cfg.context, in_cluster=cfg.in_cluster
        )
        template = JobTemplate.from_file(fetch_template(cfg.template, fetch_settings))
        return cls(
            client,
            template,
            cfg.container,
            parse_command(cfg.command),
            timeout=cfg.timeout,
            poll_interval=cfg.poll_interval,
            bus=bus,
        )

    # ------------------------------------------------------------------
    # Lifecycle steps
    # ------------------------------------------------------------------

    def build(self) -> Dict[str, Any]:
        """Return a fresh manifest with a unique name and the override args."""
        return build_job_manifest(
            self.template.copy(),
            self.container,
            self.args,
            name=generate_job_name(self.template.name),
        )

    def submit(self) -> SubmittedJob:
        manifest = self.build()
        try:
            job = self.submitter.submit(manifest)
        except SubmissionError as e:
            self.bus.publish(SubmissionFailed, name=manifest["metadata"]["name"], error=str(e))
            raise
        self.bus.publish(JobSubmitted, name=job.name, namespace=job.namespace, container=self.container)
        return job

    async def wait(
        self,
        job: SubmittedJob,
        timeout: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> JobOutcome:
        if timeout is None:
            timeout = self.timeout
        return await self.waiter.wait(job, timeout=timeout, cancel=cancel)

    def cleanup(self, job: SubmittedJob) -> None:
        self.reaper.cleanup(job)

    # ------------------------------------------------------------------
    # Whole run
    # ------------------------------------------------------------------

    async def run_async(self, cancel: Optional[asyncio.Event] = None) -> RunReport:
        """
        Submit, wait and always clean up once the job exists.
        A cleanup failure is recorded on the report; it never changes the outcome.
        """
        job = self.submit()
        report = RunReport(job=job)
        try:
            report.outcome = await self.wait(job, cancel=cancel)
        finally:
            try:
                self.cleanup(job)
            except CleanupError as e:
                log.error(str(e))
                report.cleanup_error = e

        self.bus.publish(
            RunSummary,
            name=job.name,
            outcome=report.outcome.status.value,
            cleaned_up=report.cleaned_up,
        )
        return report

    def run(self, *, handle_signals: bool = True) -> RunReport:
        """
        Blocking entry point; SIGINT/SIGTERM cancel the wait but not cleanup.
        Returns as soon as cleanup is done, even if a status read is still in flight.
        """
        return asyncio.run(self._run_with_signals(handle_signals))

    async def _run_with_signals(self, handle_signals: bool) -> RunReport:
        cancel = asyncio.Event()
        loop = asyncio.get_running_loop()
        installed = []
        if handle_signals:
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.add_signal_handler(sig, cancel.set)
                    installed.append(sig)
                except (NotImplementedError, RuntimeError):
                    # no signal handlers outside the main thread or on Windows
                    pass
        try:
            return await self.run_async(cancel=cancel)
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
