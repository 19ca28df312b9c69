"""Command-line interface for routeshare."""

import logging
import sys
import typer

from ..config import settings

# Set up logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger(__name__)

# Create typer app
app = typer.Typer(invoke_without_command=True, no_args_is_help=True,
                  help="Routeshare - turns GPX tracks and Strava activities into story overlays")

# Import commands
from .info import info
from .overlay import overlay
from .sample import sample
from .strava import strava
from .templates import templates

if __name__ == "__main__":
    app()
