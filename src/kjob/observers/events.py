# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/observers/events.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import uuid

@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events of a single job run
    context: Optional[str]  # kube-context

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(context: Optional[str], run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "context": context,
    }


# ----- Submission -----

@dataclass(frozen=True)
class JobSubmitted(BaseEvent):
    name: str
    namespace: str
    container: str

@dataclass(frozen=True)
class SubmissionFailed(BaseEvent):
    name: str
    error: str


# ----- Waiter -----

@dataclass(frozen=True)
class WaiterStarted(BaseEvent):
    name: str
    namespace: str
    timeout_s: Optional[float]

@dataclass(frozen=True)
class JobPolled(BaseEvent):
    name: str
    active: int
    attempt: int

@dataclass(frozen=True)
class WaiterSucceeded(BaseEvent):
    name: str

@dataclass(frozen=True)
class WaiterFailed(BaseEvent):
    name: str
    reason: str

@dataclass(frozen=True)
class WaiterTimedOut(BaseEvent):
    name: str
    timeout_s: Optional[float]

@dataclass(frozen=True)
class WaiterErrored(BaseEvent):
    name: str
    error: str


# ----- Cleanup & Summary -----

@dataclass(frozen=True)
class CleanupStarted(BaseEvent):
    name: str
    namespace: str
    selector: str

@dataclass(frozen=True)
class CleanupFinished(BaseEvent):
    name: str
    ok: bool
    error: Optional[str] = None

@dataclass(frozen=True)
class RunSummary(BaseEvent):
    name: str
    outcome: str      # "succeeded" | "failed" | "timed_out" | "errored"
    cleaned_up: bool
