"""Shared utilities — cross-cutting concerns importable by any layer.

Rules
-----
* No business logic.
* No network or filesystem I/O.
"""
