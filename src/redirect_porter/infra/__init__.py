"""Infrastructure layer — external system integration.

This layer wraps all interaction with the rewriter API, the local state
file, input files, process signals and the environment.  Every raw
third-party exception must be caught here and re-raised as a
:class:`~redirect_porter.exceptions.RedirectPorterError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from redirect_porter.infra.checkpoint_store import JsonCheckpointStore
from redirect_porter.infra.csv_source import CsvRecordSource
from redirect_porter.infra.interrupt import InterruptGuard
from redirect_porter.infra.rewriter_client import RewriterClient
from redirect_porter.infra.settings import Settings, load_settings

__all__: list[str] = [
    "CsvRecordSource",
    "InterruptGuard",
    "JsonCheckpointStore",
    "RewriterClient",
    "Settings",
    "load_settings",
]
