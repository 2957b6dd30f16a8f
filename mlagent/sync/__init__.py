"""Registry sync: the ingestion path from installed packages to the registry.

This package provides:
- Provenance: app descriptors recorded with every registered asset
- Engine: per-kind upsert/delete policy applied against the registry store
"""
