"""Allow ``python -m routeshare``."""

from .cli import app

if __name__ == "__main__":
    app()
