"""Command for exporting the bundled sample activity."""

import logging
from pathlib import Path
from typing import Optional

import typer

from ..sample import sample_activity, sample_gpx_text
from .utils import echo_summary
from . import app

logger = logging.getLogger(__name__)

@app.command()
def sample(
        output_file: Optional[Path] = typer.Option(
            None,
            "--output", "-o",
            help="Write the sample GPX track to this file; prints a summary otherwise"
        ),
):
    """Show or export a sample run to try the other commands on."""
    if output_file is None:
        echo_summary(sample_activity())
        return

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(sample_gpx_text(), encoding='utf-8')
    logger.info(f"Sample track written to {output_file}")
