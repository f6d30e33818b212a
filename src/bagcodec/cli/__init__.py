"""bagcodec command line interface."""

from bagcodec.cli.cli import app

__all__ = ["app"]
