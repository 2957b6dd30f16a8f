"""Registry: persistent store of ML service assets.

The registry holds:
- Models: versioned per name, with at most one active version
- Pipelines: one description per name, last write wins
- Resources: one path and description per name
"""
