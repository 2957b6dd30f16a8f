"""Manifest handling for resource packages.

A resource package declares its assets in up to three JSON files:
- model_description.json: models to register
- pipeline_description.json: pipeline descriptions
- resource_description.json: shared resources
"""
