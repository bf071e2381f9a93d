import asyncio
import time
from pathlib import Path

import click
from rich.console import Console

from tpbackup.constants import RESOURCES
from tpbackup.core.config import BackupConfig, ClientConfig, OutputMode
from tpbackup.core.errors import ConfigError, ResourceBackupError
from tpbackup.log import DEFAULT_LEVEL, setup_logging

console = Console(stderr=True)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_resources(value: str | None) -> tuple[str, ...]:
    """Split a comma separated resource list; None selects the default list."""
    if value is None:
        return RESOURCES
    names = tuple(v.strip() for v in value.split(","))
    return tuple(n for n in names if n)


@click.group()
@click.option(
    "--log-level",
    envvar="TPB_LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=DEFAULT_LEVEL,
    show_default=True,
    help="Logging verbosity (logs go to stderr)",
)
def cli(log_level: str) -> None:
    """tpbackup: back up TargetProcess resources into JSON files.

    Cycles through all or some TargetProcess resources and backs up each type
    of resource into a separate JSON document, optionally packaged into a
    single tar.gz archive.
    """
    setup_logging(log_level, console)


@cli.command("backup")
@click.option("--host", envvar="TPB_HOST", required=True, help="Host name of TargetProcess instance, e.g. myinstance.tpondemand.com")
@click.option("-u", "--user", envvar="TPB_USER", required=True, help="TargetProcess user name")
@click.option("-p", "--password", envvar="TPB_PASSWORD", required=True, help="TargetProcess password")
@click.option("--no-progress", is_flag=True, default=False, help="Hide progress bars")
@click.option("--compress", is_flag=True, default=False, help="Compress output files into single tar.gz archive")
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Target dir to put resulting JSON files  [default: ./out]",
)
@click.option(
    "-o",
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Target file name for the tar.gz archive  [default: tpbackup_<YYYYMMDDHHMM>.tar.gz]",
)
@click.option(
    "-r",
    "--resources",
    default=None,
    help="Comma separated resources list, e.g. UserStories,Bugs,Features. Run `tpbackup resources` for the default list",
)
@click.option(
    "-s",
    "--stdout",
    "to_stdout",
    is_flag=True,
    default=False,
    help="Write result to stdout as a sequence of JSON objects (one per resource) without separators",
)
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Parallel workers  [default: 1 with --stdout, else 5]")
@click.option(
    "--continue-on-error/--fail-fast",
    default=False,
    show_default=True,
    help="Keep backing up remaining resources after one fails (exit status is still non-zero)",
)
def backup_cmd(
    host: str,
    user: str,
    password: str,
    no_progress: bool,
    compress: bool,
    out_dir: Path | None,
    out: Path | None,
    resources: str | None,
    to_stdout: bool,
    concurrency: int | None,
    continue_on_error: bool,
) -> None:
    """Perform a backup."""
    if to_stdout and (compress or out_dir is not None):
        raise click.UsageError("--stdout cannot be combined with --compress or --out-dir")
    if compress and out_dir is not None:
        raise click.UsageError("--out-dir cannot be combined with --compress")
    if out is not None and not compress:
        raise click.UsageError("--out requires --compress")

    if to_stdout:
        mode = OutputMode.STDOUT
    elif compress:
        mode = OutputMode.ARCHIVE
    else:
        mode = OutputMode.FILES

    from tpbackup.orchestration.orchestrator import run_backup

    try:
        client = ClientConfig(host=host, user=user, password=password)
        client.endpoint  # fail on a bad host before any work starts
        config = BackupConfig(
            client=client,
            resources=parse_resources(resources),
            mode=mode,
            out_dir=out_dir if out_dir is not None else Path("./out"),
            archive_path=out,
            progress=not no_progress,
            concurrency=concurrency,
            continue_on_error=continue_on_error,
        )
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    t0 = time.time()
    try:
        output = asyncio.run(run_backup(config))
    except ResourceBackupError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from e

    elapsed = time.time() - t0
    stats = output.stats
    if mode is not OutputMode.STDOUT:
        where = output.archive_path if output.archive_path is not None else output.out_dir
        console.print(
            f"[bold]done[/]: {stats.resources_done} resources • "
            f"{stats.items_written} items • {elapsed:.2f}s → {where}"
        )


@cli.command("resources")
def resources_cmd() -> None:
    """Output the default list of resources."""
    click.echo("\n".join(RESOURCES))
