"""CLI command for a conversion run."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mediashrink.cli import load_config
from mediashrink.cli.exit_codes import exit_code_for
from mediashrink.cli.output import CLIResult, error_exit, success_output
from mediashrink.core.formatting import format_file_size
from mediashrink.scanner.discovery import RootNotFoundError
from mediashrink.tools.encoders import NoUsableEncoderError
from mediashrink.tools.paths import ToolNotFoundError
from mediashrink.workflow import FatalRunError, RunInterrupted, RunSummary
from mediashrink.workflow.runner import run_conversion

logger = logging.getLogger(__name__)


def _format_summary(summary: RunSummary) -> str:
    lines = [
        f"Encoder:        {summary.encoder}",
        f"Scanned:        {summary.files_scanned}",
        f"Converted:      {summary.converted}",
        f"Kept original:  {summary.kept_original}",
        f"Failed:         {summary.failed}",
        f"Skipped:        {sum(summary.skipped.values())}",
    ]
    for reason, count in sorted(summary.skipped.items()):
        lines.append(f"  {reason.value}: {count}")
    lines.append(f"Saved this run: {format_file_size(summary.bytes_saved)}")
    lines.append(f"Saved in total: {format_file_size(summary.total_saved_bytes)}")
    return "\n".join(lines)


@click.command("run")
@click.option(
    "--root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Library root (default: discovered from OneDrive settings).",
)
@click.option(
    "--min-size-mb",
    "min_file_size_mb",
    type=click.IntRange(min=0),
    default=None,
    help="Ignore files smaller than this (default: 250).",
)
@click.option(
    "--min-bitrate",
    "min_bitrate_kbps",
    type=click.IntRange(min=0),
    default=None,
    help="Bitrate floor in kbps (default: 1500).",
)
@click.option(
    "--min-savings",
    "min_savings_percent",
    type=click.FloatRange(min=0, max=100, max_open=True),
    default=None,
    help="Minimum savings percent (default: 10).",
)
@click.option(
    "--trial-seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Trial segment length in seconds (default: 30).",
)
@click.option(
    "--prefetch",
    "prefetch_count",
    type=click.IntRange(min=0),
    default=None,
    help="Upcoming files to download in the background (default: 2).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Print the run summary as JSON.",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    root: Path | None,
    min_file_size_mb: int | None,
    min_bitrate_kbps: int | None,
    min_savings_percent: float | None,
    trial_seconds: int | None,
    prefetch_count: int | None,
    json_output: bool,
) -> None:
    """Convert eligible videos under the library root to AV1.

    Files are checked cheapest-first (existing output, history, bitrate,
    codec estimate) before anything is downloaded. Admitted files get a
    trial encode, then a full conversion; the original is replaced only
    when the result is smaller.

    Examples:

        # Convert the discovered OneDrive library
        mediashrink run

        # Use a specific folder and a stricter savings floor
        mediashrink run --root D:/Videos --min-savings 25
    """
    config = load_config(
        ctx,
        root=root,
        min_file_size_mb=min_file_size_mb,
        min_bitrate_kbps=min_bitrate_kbps,
        min_savings_percent=min_savings_percent,
        trial_seconds=trial_seconds,
        prefetch_count=prefetch_count,
    )

    try:
        summary = run_conversion(config)
    except (
        RootNotFoundError, NoUsableEncoderError, ToolNotFoundError, FatalRunError
    ) as e:
        error_exit(str(e), exit_code_for(e), json_output)
    except RunInterrupted as e:
        error_exit(
            f"{e}; partial output removed and history saved",
            exit_code_for(e),
            json_output,
        )
    except OSError as e:
        logger.exception("Run aborted by an I/O error")
        error_exit(f"I/O error: {e}", exit_code_for(e), json_output)

    success_output(
        CLIResult(
            success=True,
            message=_format_summary(summary),
            data={"summary": summary.to_dict()},
        ),
        json_output,
    )
