"""Command-line entry point for proctable."""

from pathlib import Path

import click
import structlog

from proctable import log as logsetup
from proctable.app import ProctableApp
from proctable.config import DEFAULT_COUNT, SortKey, ViewConfig
from proctable.controller import InteractionController
from proctable.models import CollectionError
from proctable.monitor import ProcessMonitor


@click.command()
@click.option(
    "--order",
    "-o",
    type=click.Choice([key.value for key in SortKey], case_sensitive=False),
    default=SortKey.CPU.value,
    show_default=True,
    help="Column to sort processes by.",
)
@click.option(
    "--count",
    "-n",
    type=click.IntRange(min=1),
    default=DEFAULT_COUNT,
    show_default=True,
    help="Number of processes to show.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append JSON log lines to this file.",
)
@click.version_option(package_name="proctable")
def main(order: str, count: int, log_file: Path | None) -> None:
    """Show running processes in a sortable table and kill the selected one."""
    logsetup.configure(log_file)
    config = ViewConfig.from_options(order, count)
    controller = InteractionController(ProcessMonitor(config))

    try:
        controller.start()
    except CollectionError as exc:
        structlog.get_logger(__name__).error("startup_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    ProctableApp(controller).run()
