"""CLI commands for inspecting and editing the conversion history."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mediashrink.cli import load_config
from mediashrink.cli.exit_codes import ExitCode
from mediashrink.cli.output import CLIResult, error_exit, success_output
from mediashrink.config.models import MediaShrinkConfig
from mediashrink.core.formatting import format_file_size
from mediashrink.domain.models import OutcomeStatus
from mediashrink.history.store import HistoryStore
from mediashrink.scanner.discovery import RootNotFoundError, discover_root

logger = logging.getLogger(__name__)


def _open_store(config: MediaShrinkConfig) -> tuple[HistoryStore, Path | None]:
    """Load the history store; the root is None if it cannot be found.

    Keys are relative to the root, so only path lookups need it.
    """
    try:
        root: Path | None = discover_root(config.conversion.root)
    except RootNotFoundError as e:
        logger.debug("Root not available: %s", e)
        root = None
    return HistoryStore.load(config.history_path, root or Path.cwd()), root


@click.group("history")
def history_group() -> None:
    """Inspect or edit the record of processed files.

    Every file with a recorded outcome is skipped by later runs. Forget a
    record to have the file reconsidered.

    Examples:

        # Totals and per-status counts
        mediashrink history show

        # Reconsider one file
        mediashrink history forget "Videos/Holiday 2019.mp4"
    """
    pass


@history_group.command("show")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output as JSON.",
)
@click.option(
    "--files",
    "show_files",
    is_flag=True,
    default=False,
    help="List every record, not just totals.",
)
@click.pass_context
def history_show(ctx: click.Context, json_output: bool, show_files: bool) -> None:
    """Display total savings and outcome counts."""
    config = load_config(ctx)
    store, _ = _open_store(config)
    counts = store.status_counts()

    data = {
        "history_file": str(store.path),
        "files": len(store.records),
        "total_saved_bytes": store.total_saved_bytes,
        "statuses": {status.value: counts.get(status, 0) for status in OutcomeStatus},
    }
    lines = [
        f"History:     {store.path}",
        f"Files:       {len(store.records)}",
        f"Total saved: {format_file_size(store.total_saved_bytes)}",
    ]
    lines.extend(
        f"  {status.value}: {counts.get(status, 0)}" for status in OutcomeStatus
    )

    if show_files:
        records = sorted(store.records.items())
        data["records"] = {
            key: record.model_dump(mode="json") for key, record in records
        }
        for key, record in records:
            saved = (
                f" ({format_file_size(record.bytes_saved)})"
                if record.bytes_saved
                else ""
            )
            lines.append(f"{record.status.value:<26} {key}{saved}")

    success_output(
        CLIResult(success=True, message="\n".join(lines), data=data),
        json_output,
    )


@history_group.command("forget")
@click.argument("path")
@click.pass_context
def history_forget(ctx: click.Context, path: str) -> None:
    """Remove the record for PATH so the next run reconsiders it.

    PATH is either a history key (relative to the library root) or a
    path to the file.
    """
    config = load_config(ctx)
    store, root = _open_store(config)

    key = path.replace("\\", "/").lstrip("/")
    if key in store.records:
        removed = store.forget(key)
    elif root is not None:
        removed = store.forget(Path(path).expanduser().resolve())
    else:
        removed = False

    if not removed:
        error_exit(f"No history record for {path}", ExitCode.TARGET_NOT_FOUND)
    click.echo(f"Forgot {path}")


@history_group.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def history_reset(ctx: click.Context, yes: bool) -> None:
    """Delete every record; all files will be reconsidered."""
    config = load_config(ctx)
    store, _ = _open_store(config)

    if not yes and not click.confirm(
        f"Forget all {len(store.records)} records in {store.path}?", default=False
    ):
        raise click.Abort()

    removed = store.reset()
    click.echo(f"Removed {removed} records")
