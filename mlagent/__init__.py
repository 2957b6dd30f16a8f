"""ML agent: resource package ingestion for the on-device ML service registry."""

__version__ = "0.1.0"
