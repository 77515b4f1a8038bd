# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kjob/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml

from kjob.config.loader import load_config
from kjob.errors import ConfigError, KjobError
from kjob.job.builder import build_job_manifest
from kjob.job.naming import generate_job_name
from kjob.job.outcome import OutcomeStatus
from kjob.job.runner import JobRun, parse_command
from kjob.logging.log import init_logging, log_run_config
from kjob.observers.console import ConsoleObserver
from kjob.observers.dispatcher import EventBus
from kjob.observers.events import new_ctx
from kjob.observers.jsonfile import JsonFileObserver
from kjob.observers.logger import LoggerObserver
from kjob.template.fetch import fetch_template
from kjob.template.models import JobTemplate


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Run a one-off Kubernetes Job and clean it up afterwards")

EXIT_OK = 0
EXIT_JOB_FAILED = 1
EXIT_TIMED_OUT = 2
EXIT_POLL_ERROR = 3
EXIT_SETUP_ERROR = 4
EXIT_CLEANUP_ERROR = 5

OUTCOME_EXIT_CODES = {
    OutcomeStatus.SUCCEEDED: EXIT_OK,
    OutcomeStatus.FAILED: EXIT_JOB_FAILED,
    OutcomeStatus.TIMED_OUT: EXIT_TIMED_OUT,
    OutcomeStatus.ERRORED: EXIT_POLL_ERROR,
}


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def run(
    kubeconfig: Optional[str] = typer.Option(None, "--config", "-c", help="Kubeconfig file path"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Job template path or https:// URL"),
    command: Optional[str] = typer.Option(None, "--command", help="Command line that replaces the container args"),
    container: Optional[str] = typer.Option(None, "--container", help="Container whose args are overridden"),
    timeout: Optional[str] = typer.Option(None, "--timeout", help="Wait limit, e.g. 600, 90s, 10m. 0 waits forever"),
    context: Optional[str] = typer.Option(None, "--context", help="Kubeconfig context"),
    in_cluster: Optional[bool] = typer.Option(None, "--in-cluster/--no-in-cluster", help="Use the pod's service account"),
    poll_interval: Optional[float] = typer.Option(None, "--poll-interval", help="Seconds between status polls"),
    config_file: Optional[Path] = typer.Option(None, "--config-file", help="YAML file with run settings"),
    events: Optional[Path] = typer.Option(None, "--events", help="Append lifecycle events as JSON lines"),
    poll_events: bool = typer.Option(True, "--poll-events/--no-poll-events", help="Include status polls in the --events file"),
    echo_events: bool = typer.Option(False, "--echo-events", help="Print lifecycle events to stdout"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Submit the template as a new job, wait for it, then remove it.
    """
    logger, run_id, _ = init_logging(base_dir=log_dir, verbose=verbose)

    try:
        cfg = load_config(
            config_file,
            kubeconfig=kubeconfig,
            template=template,
            command=command,
            container=container,
            timeout=timeout,
            context=context,
            in_cluster=in_cluster,
            poll_interval=poll_interval,
        )
    except (ConfigError, OSError) as e:
        logger.error(str(e))
        raise typer.Exit(EXIT_SETUP_ERROR)

    log_run_config(logger, cfg)

    observers = [LoggerObserver(logger)]
    if echo_events:
        observers.append(ConsoleObserver())
    if events:
        observers.append(JsonFileObserver(events, include_polls=poll_events))
    bus = EventBus(observers=observers, ctx=new_ctx(context=cfg.context, run_id=run_id))

    try:
        job_run = JobRun.from_config(cfg, bus=bus)
        report = job_run.run()
    except KjobError as e:
        logger.error(str(e))
        raise typer.Exit(EXIT_SETUP_ERROR)

    logger.info(report.summary())
    code = OUTCOME_EXIT_CODES[report.outcome.status]
    if code == EXIT_OK and not report.cleaned_up:
        code = EXIT_CLEANUP_ERROR
    raise typer.Exit(code)


@app.command()
def render(
    template: str = typer.Option(..., "--template", "-t", help="Job template path or https:// URL"),
    container: str = typer.Option(..., "--container"),
    command: str = typer.Option("", "--command"),
):
    """
    Print the manifest that `run` would submit, without touching the cluster.
    """
    try:
        job_template = JobTemplate.from_file(fetch_template(template))
        manifest = build_job_manifest(
            job_template.copy(),
            container,
            parse_command(command),
            name=generate_job_name(job_template.name),
        )
    except KjobError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXIT_SETUP_ERROR)

    typer.echo(yaml.safe_dump(manifest, sort_keys=False), nl=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
