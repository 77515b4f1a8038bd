# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/logging/log.py

from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..config.models import RunConfig

LOG_DIR_ENV = "KJOB_LOG_DIR"

FORMAT = "%(asctime)s | %(levelname)-7s | %(run)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


class _RunTag(logging.Filter):
    """Stamps every record with the short run id so interleaved runs can be told apart."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run = run_id[:8]

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = self.run
        return True


def resolve_log_dir(base_dir: Optional[Path] = None) -> Path:
    """--log-dir wins, then $KJOB_LOG_DIR, then ~/.kjob/logs."""
    if base_dir is not None:
        return Path(base_dir)
    env = os.getenv(LOG_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".kjob" / "logs"


def init_logging(
    *,
    base_dir: Path | None = None,
    run_id: str | None = None,
    name: str = "kjob",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Set up logging for one job run.

    The per-run file keeps the full DEBUG trace, every status poll included.
    The console shows INFO, or DEBUG with verbose. Handlers left over from an
    earlier run in the same process are closed first. Returns the logger, the
    run id (passed through when given) and the log file path.
    """
    run_id = run_id or str(uuid.uuid4())
    log_dir = resolve_log_dir(base_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = log_dir / f"{name}-{ts}-{run_id[:8]}.log"

    logger = logging.getLogger(name)
    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    formatter = logging.Formatter(FORMAT, datefmt=DATEFMT)
    tag = _RunTag(run_id)

    trace = logging.FileHandler(log_path)
    trace.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in (trace, console):
        handler.setFormatter(formatter)
        handler.addFilter(tag)
        logger.addHandler(handler)

    logger.debug(f"run_id={run_id} log_file={log_path}")
    return logger, run_id, log_path


def log_run_config(logger: logging.Logger, cfg: "RunConfig") -> None:
    """Record what this run is about to do before any cluster call is made."""
    target = "in-cluster" if cfg.in_cluster else f"kubeconfig={cfg.kubeconfig} context={cfg.context or 'current'}"
    timeout = f"{cfg.timeout:g}s" if cfg.timeout else "none"
    logger.info(f"Job run: template={cfg.template} container={cfg.container}")
    logger.info(f"Cluster: {target}")
    logger.info(f"Wait: timeout={timeout} poll_interval={cfg.poll_interval:g}s")
    logger.debug(f"Command: {cfg.command!r}")
