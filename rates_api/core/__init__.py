"""
Core utilities shared across the rates API.

This package hosts:
- configuration helpers (env vars, data file paths, backend selection)
- cross-cutting services such as logging setup and id/timestamp helpers

Repositories and routers depend on these primitives instead of reading
os.environ directly.
"""
