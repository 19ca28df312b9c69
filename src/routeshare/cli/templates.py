"""Command for listing style presets."""

import typer

from ..templates import TEMPLATE_DESCRIPTIONS, TEMPLATES
from . import app

@app.command()
def templates():
    """List the available overlay style presets."""
    for template_id, style in TEMPLATES.items():
        typer.echo(f"{template_id}: {TEMPLATE_DESCRIPTIONS[template_id]}")
        typer.echo(f"  primary={style.primary_color} secondary={style.secondary_color} "
                   f"panel={style.background_color} font_size={style.font_size} "
                   f"position={style.position}")
