# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
import logging
from .events import BaseEvent, JobPolled


class LoggerObserver:
    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        etype = event.__class__.__name__
        msg = ", ".join(f"{k}={v}" for k, v in d.items() if k not in ("ts",))

        # polls are noisy; keep them in the file trace only
        level = logging.DEBUG if isinstance(event, JobPolled) else logging.INFO
        self.logger.log(level, f"[EVENT] {etype}: {msg}")
