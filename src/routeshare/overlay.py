"""Overlay composition module for rendering story images.

An overlay is a 1080x1920 image: an optional background photo, and on top of
it a rounded panel holding the activity name, the projected route and the
stat blocks. The panel is anchored at the top, centre or bottom of the image.
"""

import base64
import binascii
import io
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

from PIL import Image, ImageColor, ImageDraw, ImageOps

from .errors import CompositionError
from .font_manager import FontManager
from .geo import project_to_viewport
from .models import DEFAULT_STYLE, ActivityRecord, OverlayStyleConfig

logger = logging.getLogger(__name__)

STORY_WIDTH = 1080
STORY_HEIGHT = 1920

# Logical drawing region the route is projected into
MAP_VIEWPORT_WIDTH = 800
MAP_VIEWPORT_HEIGHT = 450
MAP_VIEWPORT_PADDING = 20

DEFAULT_CANVAS_COLOR = "#f8fafc"
START_MARKER_COLOR = "#10b981"
END_MARKER_COLOR = "#ef4444"

MARGIN = 60
PANEL_PADDING = 40
PANEL_RADIUS = 32
EDGE_OFFSET = 120
SECTION_GAP = 36
ROUTE_WIDTH = 6
MARKER_RADIUS = 10
RULE_WIDTH = 2
STAT_COLUMN_GUTTER = 16

RGBA = Tuple[int, int, int, int]

_RGBA_FUNCTION = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*([0-9]*\.?[0-9]+)\s*\)$")


def parse_color(value: str) -> RGBA:
    """Parse a color string into an RGBA tuple.

    Accepts everything Pillow's ImageColor understands plus CSS style
    ``rgba(r, g, b, a)`` with a fractional alpha between 0 and 1.

    Raises:
        CompositionError: If the color string is invalid
    """
    match = _RGBA_FUNCTION.match(value.strip())
    try:
        if match:
            r, g, b = (int(match.group(i)) for i in range(1, 4))
            alpha = float(match.group(4))
            if not all(0 <= c <= 255 for c in (r, g, b)) or not 0.0 <= alpha <= 1.0:
                raise ValueError("Color values out of range")
            return (r, g, b, int(round(alpha * 255)))
        return ImageColor.getcolor(value, "RGBA")
    except ValueError as e:
        raise CompositionError(f"Invalid color {value!r}: {e}") from e


def format_distance(meters: float) -> str:
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    """Format as H:MM:SS from one hour up, M:SS below."""
    total = int(math.floor(seconds + 0.5))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_elevation(meters: float) -> str:
    return f"{int(math.floor(meters + 0.5))} m"


def format_pace(seconds_per_km: float) -> str:
    if seconds_per_km <= 0:
        return "--:-- /km"
    minutes, secs = divmod(int(math.floor(seconds_per_km + 0.5)), 60)
    return f"{minutes}:{secs:02d} /km"


def decode_background(data: Union[bytes, str]) -> Image.Image:
    """Decode a caller supplied background image.

    Args:
        data: Raw image bytes, a base64 string or a ``data:`` URL

    Raises:
        CompositionError: If the payload is not a decodable image
    """
    try:
        if isinstance(data, str):
            payload = data.split(",", 1)[1] if data.startswith("data:") else data
            data = base64.b64decode(payload, validate=True)
        image = Image.open(io.BytesIO(data))
        image.load()
    except (binascii.Error, IndexError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(f"Failed to decode background image: {e}")
        raise CompositionError(f"Invalid background image: {e}") from e
    return image


def resolve_style(style: Union[OverlayStyleConfig, Mapping[str, Any], None]) -> OverlayStyleConfig:
    """Merge a partial style over the defaults, or validate a complete one."""
    if isinstance(style, OverlayStyleConfig):
        return style.validate()
    return DEFAULT_STYLE.merged(style)


@dataclass
class _Section:
    """A vertical slice of the panel layout."""
    kind: str
    height: int


class OverlayComposer:
    """Renders activities into story overlay images."""

    def __init__(self, font_manager: Optional[FontManager] = None,
                 canvas_color: str = DEFAULT_CANVAS_COLOR, transparent: bool = False,
                 size: Tuple[int, int] = (STORY_WIDTH, STORY_HEIGHT)):
        """Initialize the composer.

        Args:
            font_manager: Font source, a default FontManager if omitted
            canvas_color: Canvas fill used when no background image is given
            transparent: Leave the canvas transparent instead of filling it
            size: Output (width, height) in pixels
        """
        self.font_manager = font_manager or FontManager()
        self.canvas_color = canvas_color
        self.transparent = transparent
        self.width, self.height = size

    def compose(self, activity: ActivityRecord,
                style: Union[OverlayStyleConfig, Mapping[str, Any], None] = None,
                background: Union[bytes, str, None] = None,
                image_format: str = "PNG") -> bytes:
        """Render the overlay and return the encoded image.

        Args:
            activity: Activity to render
            style: Full style, partial overrides of the defaults, or None
            background: Optional background image (bytes, base64 or data URL)
            image_format: Pillow format name of the output, PNG by default

        Returns:
            Encoded image bytes

        Raises:
            CompositionError: If any stage fails; nothing partial is returned
        """
        style = resolve_style(style)
        try:
            image = self.render(activity, style, background)
            return self._encode(image, image_format)
        except CompositionError:
            raise
        except Exception as e:
            logger.error(f"Error generating overlay: {e}")
            raise CompositionError(f"Failed to generate overlay: {e}") from e

    def render(self, activity: ActivityRecord, style: OverlayStyleConfig,
               background: Union[bytes, str, None] = None) -> Image.Image:
        """Render the overlay to an RGBA image."""
        canvas = self._create_canvas(background)

        measure = ImageDraw.Draw(canvas)
        sections = self._layout(measure, activity, style)
        panel_height = 2 * PANEL_PADDING + sum(s.height for s in sections) \
            + SECTION_GAP * (len(sections) - 1)
        top = self._panel_top(panel_height, style.position)

        # Translucent panel fills need blending, so they go through a layer
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(layer).rounded_rectangle(
            (MARGIN, top, self.width - MARGIN, top + panel_height),
            radius=PANEL_RADIUS,
            fill=parse_color(style.background_color),
        )
        canvas = Image.alpha_composite(canvas, layer)

        draw = ImageDraw.Draw(canvas)
        y = top + PANEL_PADDING
        for section in sections:
            if section.kind == "title":
                self._draw_title(draw, activity.name, style, y)
            elif section.kind == "map":
                self._draw_route(draw, activity, style, y, section.height)
            elif section.kind == "stats":
                self._draw_stats(draw, activity, style, y)
            elif section.kind == "pace":
                self._draw_pace(draw, activity, style, y)
            y += section.height + SECTION_GAP

        logger.info(f"Rendered overlay for '{activity.name}' ({style.position}, "
                    f"map={style.show_map}, stats={style.show_stats})")
        return canvas

    @property
    def content_width(self) -> int:
        return self.width - 2 * (MARGIN + PANEL_PADDING)

    @property
    def content_left(self) -> int:
        return MARGIN + PANEL_PADDING

    def _create_canvas(self, background: Union[bytes, str, None]) -> Image.Image:
        if background is not None:
            image = decode_background(background).convert("RGBA")
            # Scale to cover and crop around the centre
            return ImageOps.fit(image, (self.width, self.height), method=Image.Resampling.LANCZOS)
        fill = (0, 0, 0, 0) if self.transparent else parse_color(self.canvas_color)
        return Image.new("RGBA", (self.width, self.height), fill)

    def _title_size(self, style: OverlayStyleConfig) -> int:
        return min(int(style.font_size * 1.2), 72)

    def _label_size(self, style: OverlayStyleConfig) -> int:
        return max(12, int(style.font_size * 0.6))

    def _layout(self, draw: ImageDraw.ImageDraw, activity: ActivityRecord,
                style: OverlayStyleConfig) -> List[_Section]:
        fonts = self.font_manager
        sections = [_Section("title", fonts.get_text_size(
            draw, "Ag", self._title_size(style), bold=True)[1])]

        if style.show_map and len(activity.coordinates) >= 2:
            sections.append(_Section(
                "map", int(self.content_width * MAP_VIEWPORT_HEIGHT / MAP_VIEWPORT_WIDTH)))

        if style.show_stats:
            label_height = fonts.get_text_size(draw, "Ag", self._label_size(style))[1]
            value_height = fonts.get_text_size(draw, "0:00", style.font_size, bold=True)[1]
            sections.append(_Section("stats", label_height + 12 + value_height))
            sections.append(_Section("pace", label_height))

        return sections

    def _panel_top(self, panel_height: int, position: str) -> int:
        if position == "top":
            return EDGE_OFFSET
        if position == "center":
            return (self.height - panel_height) // 2
        return self.height - panel_height - EDGE_OFFSET

    def _draw_title(self, draw: ImageDraw.ImageDraw, name: str, style: OverlayStyleConfig,
                    y: int) -> None:
        size = self._title_size(style)
        text = self.font_manager.fit_text(draw, name, size, self.content_width, bold=True)
        draw.text((self.width // 2, y), text, fill=parse_color(style.primary_color),
                  font=self.font_manager.get_font(size, bold=True), anchor="mt")

    def _draw_route(self, draw: ImageDraw.ImageDraw, activity: ActivityRecord,
                    style: OverlayStyleConfig, y: int, height: int) -> None:
        path = project_to_viewport(activity.coordinates, MAP_VIEWPORT_WIDTH,
                                   MAP_VIEWPORT_HEIGHT, MAP_VIEWPORT_PADDING)
        scale = self.content_width / MAP_VIEWPORT_WIDTH
        points = [(self.content_left + px * scale, y + py * scale) for px, py in path]

        draw.line(points, fill=parse_color(style.primary_color), width=ROUTE_WIDTH, joint="curve")
        for (cx, cy), color in ((points[0], START_MARKER_COLOR), (points[-1], END_MARKER_COLOR)):
            draw.ellipse((cx - MARKER_RADIUS, cy - MARKER_RADIUS, cx + MARKER_RADIUS, cy + MARKER_RADIUS),
                         fill=parse_color(color))

        if style.show_stats:
            rule_y = y + height + SECTION_GAP // 2
            draw.line((self.content_left, rule_y, self.content_left + self.content_width, rule_y),
                      fill=parse_color(style.secondary_color), width=RULE_WIDTH)

    def stat_values(self, activity: ActivityRecord) -> List[Tuple[str, str]]:
        """Return the (label, value) pairs of the stat blocks."""
        return [
            ("Distance", format_distance(activity.distance_meters)),
            ("Duration", format_duration(activity.duration_seconds)),
            ("Elevation", format_elevation(activity.elevation_gain_meters)),
        ]

    def _column_size(self, draw: ImageDraw.ImageDraw, texts: List[str], size: int,
                     column_width: int, bold: bool = False) -> int:
        # One shared size per row so the blocks stay aligned; text is never cut
        return min(self.font_manager.fit_size(draw, text, size, column_width - STAT_COLUMN_GUTTER,
                                              bold=bold)
                   for text in texts)

    def _draw_stats(self, draw: ImageDraw.ImageDraw, activity: ActivityRecord,
                    style: OverlayStyleConfig, y: int) -> None:
        stats = self.stat_values(activity)
        column_width = self.content_width // len(stats)

        label_size = self._column_size(draw, [label for label, _ in stats],
                                       self._label_size(style), column_width)
        value_size = self._column_size(draw, [value for _, value in stats],
                                       style.font_size, column_width, bold=True)
        label_font = self.font_manager.get_font(label_size)
        value_font = self.font_manager.get_font(value_size, bold=True)
        label_height = self.font_manager.get_text_size(draw, "Ag", label_size)[1]
        value_height = self.font_manager.get_text_size(draw, "0:00", style.font_size, bold=True)[1]

        primary = parse_color(style.primary_color)
        secondary = parse_color(style.secondary_color)

        for index, (label, value) in enumerate(stats):
            center_x = self.content_left + column_width * index + column_width // 2
            draw.text((center_x, y), label, fill=secondary, font=label_font, anchor="mt")
            draw.text((center_x, y + label_height + 12), value, fill=primary, font=value_font, anchor="mt")

            if index:
                rule_x = self.content_left + column_width * index
                draw.line((rule_x, y, rule_x, y + label_height + 12 + value_height),
                          fill=secondary, width=RULE_WIDTH)

    def _draw_pace(self, draw: ImageDraw.ImageDraw, activity: ActivityRecord,
                   style: OverlayStyleConfig, y: int) -> None:
        text = f"Pace {format_pace(activity.pace_seconds_per_km)}"
        draw.text((self.width // 2, y), text, fill=parse_color(style.secondary_color),
                  font=self.font_manager.get_font(self._label_size(style)), anchor="mt")

    def _encode(self, image: Image.Image, image_format: str) -> bytes:
        if image_format.upper() in ("JPEG", "JPG"):
            image = image.convert("RGB")
            image_format = "JPEG"
        buffer = io.BytesIO()
        image.save(buffer, format=image_format)
        return buffer.getvalue()


def compose_overlay(activity: ActivityRecord,
                    style: Union[OverlayStyleConfig, Mapping[str, Any], None] = None,
                    background: Union[bytes, str, None] = None,
                    font_file: Optional[str] = None) -> bytes:
    """Render ``activity`` into a PNG story overlay with a default composer."""
    composer = OverlayComposer(font_manager=FontManager(font_file))
    return composer.compose(activity, style, background)
