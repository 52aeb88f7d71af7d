"""Building blocks for HTTP and FTP load testing: wire readers, an FTP client, request bodies, settings and a transaction log."""

__version__ = "0.1.0"