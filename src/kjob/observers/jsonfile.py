# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/observers/jsonfile.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .events import BaseEvent, JobPolled, RunSummary, WaiterStarted

_HEADER = ("ts", "run_id", "context", "name")


def event_record(event: BaseEvent) -> Dict[str, Any]:
    """
    One JSON line per event, keyed by job:

        {"event": "RunSummary", "job": "demo-<hex>", "run_id": ..., "ts": ...,
         "context": ..., "outcome": "succeeded", "cleaned_up": true, "ok": true}
    """
    data = event.dict()
    record: Dict[str, Any] = {
        "event": event.__class__.__name__,
        "job": data.get("name"),
        "run_id": data["run_id"],
        "ts": data["ts"],
        "context": data["context"],
    }
    record.update((k, v) for k, v in data.items() if k not in _HEADER)

    if isinstance(event, WaiterStarted) and not event.timeout_s:
        record["timeout_s"] = None
    if isinstance(event, RunSummary):
        # single field a pipeline can gate on
        record["ok"] = event.outcome == "succeeded" and event.cleaned_up
    return record


class JsonFileObserver:
    """Appends job lifecycle events to a JSON-lines file. Polls are optional."""

    def __init__(self, path: str | Path, *, include_polls: bool = True):
        self.path = Path(path)
        self.include_polls = include_polls
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def notify(self, event: BaseEvent) -> None:
        if isinstance(event, JobPolled) and not self.include_polls:
            return
        with self.path.open("a") as f:
            json.dump(event_record(event), f)
            f.write("\n")
