"""embed-scout — find third-party video embed links on script-rendered pages."""

__version__ = "0.1.0"
