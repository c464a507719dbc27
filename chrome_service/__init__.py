"""HTML to PDF/PNG rendering service backed by Chromium."""

__version__ = "1.0.0"
