"""Infrastructure: runtime settings from the environment and ``.env``.

The session (account, workspace, token) is passed explicitly to every
component that needs it; nothing reads it from process-wide state.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from redirect_porter.exceptions import ConfigurationError
from redirect_porter.utils.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_INTERVAL_S,
    DEFAULT_TIMEOUT_S,
    STATE_FILE_NAME,
)

ENV_PREFIX = "REDIRECT_PORTER_"

DEFAULT_API_URL = "https://{workspace}--{account}.myvtex.com/_v/private/rewriter/graphql"


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved configuration for one CLI invocation."""

    account: str
    workspace: str
    token: str | None
    api_url_template: str
    state_file: Path
    max_retries: int
    retry_interval: float
    timeout: float

    @property
    def api_url(self) -> str:
        return self.api_url_template.format(
            account=self.account,
            workspace=self.workspace,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.account and self.token)

    def require_credentials(self) -> None:
        """Raise :class:`ConfigurationError` unless account and token are set."""
        if not self.account:
            raise ConfigurationError(
                "No account configured.",
                hint=f"Set {ENV_PREFIX}ACCOUNT or pass --account.",
            )
        if not self.token:
            raise ConfigurationError(
                "No API token configured.",
                hint=f"Set {ENV_PREFIX}TOKEN in the environment or in a .env file.",
            )


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be an integer, got {raw!r}.",
        ) from exc
    if value < 0:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must not be negative.")
    return value


def _read_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be a number, got {raw!r}.",
        ) from exc
    if value < 0:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must not be negative.")
    return value


def load_settings(
    *,
    account: str | None = None,
    workspace: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve :class:`Settings`.

    Explicit *account* / *workspace* arguments (CLI flags) win over the
    environment.  When *environ* is ``None`` a ``.env`` file in the working
    directory is loaded into ``os.environ`` first.

    Raises
    ------
    ConfigurationError
        When a numeric setting cannot be parsed.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    state_file = environ.get(ENV_PREFIX + "STATE_FILE") or STATE_FILE_NAME

    return Settings(
        account=account or environ.get(ENV_PREFIX + "ACCOUNT", ""),
        workspace=workspace or environ.get(ENV_PREFIX + "WORKSPACE") or "master",
        token=environ.get(ENV_PREFIX + "TOKEN") or None,
        api_url_template=environ.get(ENV_PREFIX + "API_URL") or DEFAULT_API_URL,
        state_file=Path(state_file).expanduser(),
        max_retries=_read_int(environ, "MAX_RETRIES", DEFAULT_MAX_RETRIES),
        retry_interval=_read_float(environ, "RETRY_INTERVAL", DEFAULT_RETRY_INTERVAL_S),
        timeout=_read_float(environ, "TIMEOUT", DEFAULT_TIMEOUT_S),
    )
