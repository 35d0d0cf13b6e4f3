"""rtcheck: health checks for optional language runtimes."""

__version__ = "0.1.0"
