"""Read-only Azure Monitor metrics samples."""

__version__ = "0.1.0"
