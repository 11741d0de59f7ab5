"""Fixed limits and file names shared by every layer."""

from __future__ import annotations

MAX_ENTRIES_PER_REQUEST: int = 10
"""Largest number of records the rewriter accepts in a single request."""

INPUT_DELIMITER: str = ";"
"""Column delimiter of redirect input files."""

STATE_FILE_NAME: str = ".vtex_redirects_metainfo.json"
"""Default name of the local checkpoint state file."""

RESET_FILE_PREFIX: str = ".vtex_redirects_to_delete_"
"""Prefix of the intermediate file written by ``import --reset``."""

DEFAULT_MAX_RETRIES: int = 10
DEFAULT_RETRY_INTERVAL_S: float = 5.0
DEFAULT_TIMEOUT_S: float = 30.0

PROG: str = "redirect-porter"
"""Console-script name, used in resume instructions."""
