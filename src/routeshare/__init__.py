"""Routeshare - turns GPX tracks and Strava activities into shareable story overlays."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("routeshare")
except PackageNotFoundError:
    __version__ = "0.1.0"  # Default version if package is not installed
