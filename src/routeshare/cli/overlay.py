"""Command for rendering story overlays."""

import logging
from pathlib import Path
from typing import Optional

import typer

from ..config import settings
from ..errors import RouteshareError
from ..font_manager import FontManager
from ..models import DEFAULT_STYLE
from ..overlay import OverlayComposer
from ..templates import get_template_style
from .utils import load_activity, style_overrides, validate_position
from . import app

logger = logging.getLogger(__name__)

@app.command()
def overlay(
    input_file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a GPX file or an activity JSON file"
    ),
    output_file: Path = typer.Option(
        None,
        "--output", "-o",
        help="Path to the output image (default: input filename with .png extension)"
    ),
    background: Optional[Path] = typer.Option(
        None,
        "--background", "-b",
        help="Image placed beneath the overlay, scaled to cover the story",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True
    ),
    template: Optional[str] = typer.Option(
        None,
        "--template", "-t",
        help="Start from a named style preset (see the templates command)"
    ),
    primary_color: Optional[str] = typer.Option(
        None,
        "--primary-color",
        help="Color of the route and stat values as #rrggbb"
    ),
    secondary_color: Optional[str] = typer.Option(
        None,
        "--secondary-color",
        help="Color of labels and rules as #rrggbb"
    ),
    background_color: Optional[str] = typer.Option(
        None,
        "--background-color",
        help="Panel fill, e.g. '#ffffff' or 'rgba(255, 255, 255, 0.9)'"
    ),
    font_size: Optional[int] = typer.Option(
        None,
        "--font-size", "-fs",
        min=12,
        max=120,
        help="Font size of the stat values in pixels"
    ),
    position: Optional[str] = typer.Option(
        None,
        "--position", "-p",
        callback=validate_position,
        help="Where the panel sits (top, center, bottom)"
    ),
    no_map: bool = typer.Option(
        False,
        "--no-map",
        help="Leave out the route map"
    ),
    no_stats: bool = typer.Option(
        False,
        "--no-stats",
        help="Leave out the stat blocks"
    ),
    font_file: Optional[Path] = typer.Option(
        None,
        "--font", "-ff",
        help="Path to a TrueType font file (.ttf) for text rendering",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True
    ),
    transparent: bool = typer.Option(
        False,
        "--transparent",
        help="Leave the canvas transparent when no background image is given"
    ),
):
    """Render a 1080x1920 story overlay for a track.

    Style options override the chosen template (or the defaults) one by one.
    """
    if output_file is None:
        output_file = input_file.with_suffix(".png")

    try:
        base_style = get_template_style(template) if template else DEFAULT_STYLE
    except LookupError as e:
        raise typer.BadParameter(str(e), param_hint="--template")

    try:
        activity = load_activity(input_file)
        style = base_style.merged(style_overrides(
            primary_color=primary_color,
            secondary_color=secondary_color,
            background_color=background_color,
            font_size=font_size,
            position=position,
            show_map=False if no_map else None,
            show_stats=False if no_stats else None,
        ))

        font = str(font_file) if font_file else (settings.FONT_FILE or None)
        composer = OverlayComposer(font_manager=FontManager(font), transparent=transparent)
        image_bytes = composer.compose(
            activity,
            style,
            background=background.read_bytes() if background else None,
        )
    except RouteshareError as e:
        logger.error(f"Error generating overlay: {e}")
        raise typer.Abort()

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_bytes(image_bytes)
    logger.info(f"Overlay generated successfully: {output_file}")
