# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/observers/dispatcher.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Protocol
from .events import BaseEvent, new_ctx

log = logging.getLogger("kjob")


class Observer(Protocol):
    def notify(self, event: BaseEvent) -> None: ...


class EventBus:
    def __init__(self, observers: Optional[List[Observer]] = None, ctx: Optional[Dict[str, Any]] = None):
        self._observers = observers or []
        self._ctx = ctx or new_ctx(context=None)

    @property
    def run_id(self) -> str:
        return self._ctx["run_id"]

    def publish(self, event_cls: type[BaseEvent], **fields: Any) -> None:
        """Build an event stamped with this bus's run context and emit it."""
        ctx = new_ctx(context=self._ctx.get("context"), run_id=self._ctx["run_id"])
        self.emit(event_cls(**ctx, **fields))

    def emit(self, event: BaseEvent) -> None:
        for ob in self._observers:
            try:
                ob.notify(event)
            except Exception:
                # observers must not break job runs
                log.debug("observer %r failed on %s", ob, event.__class__.__name__, exc_info=True)
