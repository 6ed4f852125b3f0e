"""colctl — console client for a remote collection service over UDP."""

__version__ = "0.1.0"
