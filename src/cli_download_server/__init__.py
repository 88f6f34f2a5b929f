"""HTTP server for gzip-stored CLI downloads."""

__version__ = "0.1.0"
