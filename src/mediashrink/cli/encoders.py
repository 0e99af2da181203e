"""CLI command for checking encoder availability."""

from __future__ import annotations

import click

from mediashrink.cli import load_config
from mediashrink.cli.exit_codes import exit_code_for
from mediashrink.cli.output import CLIResult, error_exit, success_output
from mediashrink.executor.ffmpeg import FFmpegEncoder
from mediashrink.tools.encoders import (
    ENCODER_PROFILES,
    NoUsableEncoderError,
    select_encoder,
)
from mediashrink.tools.paths import ToolNotFoundError


@click.command("encoders")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output as JSON.",
)
@click.pass_context
def encoders_command(ctx: click.Context, json_output: bool) -> None:
    """Show which encoder a run would use.

    Profiles are tried in priority order with a one-second synthetic
    encode; hardware encoders come before libsvtav1.
    """
    config = load_config(ctx)
    try:
        encoder = FFmpegEncoder(config.tools.ffmpeg)
        profile = select_encoder(encoder)
    except (NoUsableEncoderError, ToolNotFoundError) as e:
        error_exit(str(e), exit_code_for(e), json_output)

    priority = ", ".join(p.id for p in ENCODER_PROFILES)
    success_output(
        CLIResult(
            success=True,
            message=(
                f"Selected encoder: {profile.label} ({profile.id})\n"
                f"Priority order: {priority}"
            ),
            data={
                "encoder": profile.id,
                "label": profile.label,
                "hardware": profile.hardware,
                "codec_family": profile.codec_family,
            },
        ),
        json_output,
    )
