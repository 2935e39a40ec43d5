"""CLI command that runs the housekeeping scheduler in the foreground."""

from __future__ import annotations

import logging
import threading

import click

from ims.infrastructure.bootstrap import build_scheduler
from ims.infrastructure.cli.context import CliState, pass_state

logger = logging.getLogger(__name__)


@click.command("run")
@click.option("--once", is_flag=True, help="Run each job a single time and exit.")
@pass_state
def scheduler_run(state: CliState, once: bool) -> None:
    """Run the low-stock sweep and purchase order auto-approval."""
    scheduler = build_scheduler(state.services)

    if once:
        for task in scheduler.tasks:
            task.run_once()
        click.echo("Housekeeping jobs finished")
        return

    scheduler.start()
    click.echo("Scheduler running; press Ctrl+C to stop.")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        logger.info("Shutdown requested")
    finally:
        scheduler.stop()
