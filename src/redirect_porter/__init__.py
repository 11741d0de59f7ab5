"""redirect-porter — resumable bulk import and deletion of redirect rules.

Built on a strict layered architecture: a pure ``core`` transfer engine,
an ``infra`` layer for files, signals and the remote rewriter API, and a
thin ``cli`` layer on top.
"""

from redirect_porter.version import __version__

__all__: list[str] = ["__version__"]
