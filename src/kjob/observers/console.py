# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/observers/console.py
import typer

from .events import BaseEvent, JobPolled


class ConsoleObserver:
    def notify(self, event: BaseEvent) -> None:
        if isinstance(event, JobPolled):
            return
        d = event.dict()
        k = event.__class__.__name__
        typer.echo(f"[{d['ts']}] {k} run={d['run_id']} ctx={d['context']} data={{"
              + ", ".join(f"{x}={y}" for x,y in d.items() if x not in ('ts','run_id','context')) + "}")
