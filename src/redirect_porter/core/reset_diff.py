"""Reset diff — which remote rules disappear after a fresh import."""

from __future__ import annotations

from collections.abc import Iterable


def routes_to_delete(
    indexed_routes: Iterable[str],
    imported_routes: Iterable[str],
) -> list[str]:
    """Return rules present in *indexed_routes* but absent from *imported_routes*.

    A pure set difference; the result keeps the index order and lists
    each rule once.
    """
    imported = set(imported_routes)
    seen: set[str] = set()
    result: list[str] = []
    for route in indexed_routes:
        if route in imported or route in seen:
            continue
        seen.add(route)
        result.append(route)
    return result
