"""Example script demonstrating how to use routeshare programmatically.

This script shows how to turn a GPX track into a story overlay, both with the
default style and with a template plus a background photo.
"""

import logging
import sys
from pathlib import Path

# Import from the installed package
from routeshare.gpx_parser import GPXParser
from routeshare.overlay import OverlayComposer, compose_overlay
from routeshare.sample import sample_gpx_text
from routeshare.templates import get_template_style

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

def generate_basic_overlay(gpx_file_path, output_file_path=None):
    """Generate an overlay from a GPX file with default settings.

    Args:
        gpx_file_path: Path to the GPX file
        output_file_path: Path to the output image (default: GPX filename with .png extension)

    Returns:
        Path to the generated image
    """
    gpx_path = Path(gpx_file_path)
    output_path = Path(output_file_path) if output_file_path else gpx_path.with_suffix(".png")

    print(f"Parsing GPX file: {gpx_path}")
    activity = GPXParser(str(gpx_path)).parse()
    print(f"{activity.name}: {activity.distance_meters / 1000:.2f} km in {activity.duration_seconds:.0f} s")

    output_path.write_bytes(compose_overlay(activity))
    print(f"Overlay generated successfully: {output_path}")
    return output_path

def generate_styled_overlay(gpx_file_path, background_path=None, template="bold"):
    """Generate an overlay using a template, an override and an optional photo.

    Args:
        gpx_file_path: Path to the GPX file
        background_path: Optional image placed beneath the overlay
        template: Name of the style preset to start from

    Returns:
        Path to the generated image
    """
    gpx_path = Path(gpx_file_path)
    output_path = gpx_path.with_stem(f"{gpx_path.stem}_{template}").with_suffix(".png")

    activity = GPXParser(str(gpx_path)).parse()
    style = get_template_style(template).merged({"position": "bottom"})
    background = Path(background_path).read_bytes() if background_path else None

    composer = OverlayComposer()
    output_path.write_bytes(composer.compose(activity, style, background=background))
    print(f"Overlay generated successfully: {output_path}")
    return output_path

if __name__ == "__main__":
    if len(sys.argv) > 1:
        gpx_file = sys.argv[1]
    else:
        # No track given, try the bundled sample run
        gpx_file = Path("sample.gpx")
        gpx_file.write_text(sample_gpx_text(), encoding="utf-8")
        print(f"No GPX file given, using the sample run: {gpx_file}")
    background_file = sys.argv[2] if len(sys.argv) > 2 else None

    print("\n=== Example 1: Default Overlay ===")
    basic_output = generate_basic_overlay(gpx_file)

    print("\n=== Example 2: Template With Background ===")
    styled_output = generate_styled_overlay(gpx_file, background_file)

    print("\n=== Summary ===")
    print(f"Default overlay: {basic_output}")
    print(f"Styled overlay: {styled_output}")
