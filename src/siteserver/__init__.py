"""Server-rendered site: page rendering, static assets, sessions, API shim and daily jobs."""

__version__ = "0.1.0"
