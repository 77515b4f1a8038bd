# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/job/outcome.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import JobFailed, JobTimedOut, PollError


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"


@dataclass(frozen=True)
class SubmittedJob:
    """The job as accepted by the cluster; identity is (namespace, name)."""

    namespace: str
    name: str
    manifest: Dict[str, Any]

    @property
    def selector(self) -> str:
        # the job controller labels every pod it creates with job-name
        return f"job-name={self.name}"


@dataclass(frozen=True)
class JobOutcome:
    status: OutcomeStatus
    name: str
    reason: Optional[str] = None
    cause: Optional[BaseException] = None
    timeout: Optional[float] = None

    @classmethod
    def succeeded(cls, name: str) -> "JobOutcome":
        return cls(OutcomeStatus.SUCCEEDED, name)

    @classmethod
    def failed(cls, name: str, reason: str) -> "JobOutcome":
        return cls(OutcomeStatus.FAILED, name, reason=reason)

    @classmethod
    def timed_out(cls, name: str, timeout: Optional[float]) -> "JobOutcome":
        return cls(OutcomeStatus.TIMED_OUT, name, timeout=timeout)

    @classmethod
    def errored(cls, name: str, cause: BaseException) -> "JobOutcome":
        return cls(OutcomeStatus.ERRORED, name, reason=str(cause), cause=cause)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    def raise_for_status(self) -> None:
        if self.status is OutcomeStatus.FAILED:
            raise JobFailed(self.name, self.reason or "unknown")
        if self.status is OutcomeStatus.TIMED_OUT:
            raise JobTimedOut(self.name, self.timeout)
        if self.status is OutcomeStatus.ERRORED:
            raise PollError(f"Polling job {self.name} failed: {self.reason}") from self.cause

    def __str__(self) -> str:
        if self.reason:
            return f"{self.status.value} ({self.reason})"
        return self.status.value
