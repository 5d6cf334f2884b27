"""Daily active user tracking on Redis bitmaps."""

__version__ = "0.1.0"
