"""Named overlay style presets."""

from typing import Dict

from .models import DEFAULT_STYLE, OverlayStyleConfig

TEMPLATES: Dict[str, OverlayStyleConfig] = {
    "minimal": DEFAULT_STYLE,
    "bold": OverlayStyleConfig(
        primary_color="#ffffff",
        secondary_color="#cccccc",
        background_color="rgba(0, 0, 0, 0.8)",
        font_size=56,
        position="center",
    ),
    "colorful": OverlayStyleConfig(
        primary_color="#3b82f6",
        secondary_color="#1e40af",
        background_color="rgba(59, 130, 246, 0.1)",
        font_size=52,
        position="top",
    ),
}

TEMPLATE_DESCRIPTIONS = {
    "minimal": "Clean, simple design with essential stats",
    "bold": "High contrast design with large text",
    "colorful": "Vibrant colors on a tinted panel",
}


def get_template_style(template_id: str) -> OverlayStyleConfig:
    """Look up a preset by id.

    Raises:
        LookupError: If no template has that id
    """
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise LookupError(
            f"Unknown template '{template_id}', expected one of: {', '.join(TEMPLATES)}") from None
