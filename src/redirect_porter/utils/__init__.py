"""Shared utilities: fixed limits and file names used across layers.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""
