"""httpx backed implementation of :class:`~redirect_porter.core.protocols.RewriterApi`.

This module is the **only** place in the codebase that talks to the
rewriter GraphQL endpoint.  All httpx exceptions and error responses are
mapped here:

* timeouts, transport errors, HTTP 429 and 5xx → :class:`RemoteTransientError`
* GraphQL ``errors`` payloads and other 4xx responses → :class:`RemotePermanentError`
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from redirect_porter.core.models import Redirect
from redirect_porter.exceptions import RemotePermanentError, RemoteTransientError
from redirect_porter.infra.settings import Settings
from redirect_porter.version import __version__

logger = logging.getLogger(__name__)

SAVE_MANY = """
mutation SaveMany($routes: [RedirectInput!]!) {
  redirect {
    saveMany(routes: $routes)
  }
}
"""

DELETE_MANY = """
mutation DeleteMany($paths: [String!]!) {
  redirect {
    deleteMany(paths: $paths)
  }
}
"""

INDEX_FILES = """
query RoutesIndexFiles {
  redirect {
    indexFiles {
      routeIndexFiles {
        fileName
        fileSize
      }
    }
  }
}
"""

INDEX_FILE = """
query RoutesIndex($fileName: String!) {
  redirect {
    indexFile(fileName: $fileName) {
      id
    }
  }
}
"""


class RewriterClient:
    """Concrete :class:`RewriterApi` speaking GraphQL over httpx.

    Usage::

        with RewriterClient(settings) as client:
            client.import_redirects(redirects)

    Parameters
    ----------
    settings:
        Resolved settings; account, workspace and token must be present.
    transport:
        Optional httpx transport, used by tests to avoid the network.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = settings.api_url
        headers = {"User-Agent": f"redirect-porter/{__version__}"}
        if settings.token:
            headers["Authorization"] = f"Bearer {settings.token}"
        self._session = httpx.Client(
            headers=headers,
            timeout=settings.timeout,
            transport=transport,
        )
        logger.debug("Initialized RewriterClient [url=%s]", self._url)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> RewriterClient:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def import_redirects(self, redirects: Sequence[Redirect]) -> None:
        self._execute(
            SAVE_MANY,
            {"routes": [redirect.to_payload() for redirect in redirects]},
        )

    def delete_redirects(self, paths: Sequence[str]) -> None:
        self._execute(DELETE_MANY, {"paths": list(paths)})

    def routes_index_files(self) -> list[str]:
        data = self._execute(INDEX_FILES, {})
        files = _dig(data, "redirect", "indexFiles", "routeIndexFiles") or []
        return [str(entry["fileName"]) for entry in files if isinstance(entry, dict)]

    def routes_index(self, file_name: str) -> list[str]:
        data = self._execute(INDEX_FILE, {"fileName": file_name})
        entries = _dig(data, "redirect", "indexFile") or []
        return [str(entry["id"]) for entry in entries if isinstance(entry, dict)]

    # ------------------------------------------------------------------
    # Transport and error mapping
    # ------------------------------------------------------------------

    def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._session.post(
                self._url,
                json={"query": query, "variables": variables},
            )
        except httpx.TimeoutException as exc:
            raise RemoteTransientError(f"Request to the rewriter timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise RemoteTransientError(f"Network error talking to the rewriter: {exc}") from exc

        status = response.status_code
        if status == 429 or status >= 500:
            raise RemoteTransientError(f"Rewriter responded with HTTP {status}.")

        try:
            payload = response.json()
        except ValueError as exc:
            if status >= 400:
                raise RemotePermanentError(
                    f"Rewriter rejected the request with HTTP {status}.",
                ) from exc
            raise RemoteTransientError("Rewriter returned a response that is not JSON.") from exc

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = [
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            ]
            raise RemotePermanentError(
                "Rewriter rejected the request.",
                messages=messages,
            )

        if status >= 400:
            hint = None
            if status in (401, 403):
                hint = "Check that the API token is valid for this account."
            raise RemotePermanentError(
                f"Rewriter rejected the request with HTTP {status}.",
                hint=hint,
            )

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise RemoteTransientError("Rewriter response has no data.")
        return data


def _dig(data: dict[str, Any], *keys: str) -> Any:
    """Follow *keys* through nested dicts, returning ``None`` on a gap."""
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
