"""Live terminal view and keyboard remote for an MPD server."""

__version__ = "0.4.0"
