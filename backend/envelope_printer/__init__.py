"""Envelope printer backend: address spreadsheet ingestion and envelope composition."""

__version__ = "0.1.0"
