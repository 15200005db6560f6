"""Stored-file records, file and compression helpers, base64 and log writing tools."""

__version__ = "0.1.0"