"""JSON-file backed product catalog service with CSV bulk import."""

__version__ = "0.1.0"
