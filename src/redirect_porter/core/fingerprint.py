"""Content fingerprints identifying a unit of transfer work.

The fingerprint is only a checkpoint lookup key; it is not a security
boundary, so MD5 is sufficient.
"""

from __future__ import annotations

import hashlib

from redirect_porter.core.models import WorkIdentity


def fingerprint(account: str, workspace: str, data: bytes) -> str:
    """Return the hex digest identifying *data* within an account/workspace.

    Identical inputs always yield the same digest; any change to a single
    byte of *data* yields a different one.
    """
    digest = hashlib.md5(usedforsecurity=False)
    digest.update(f"{account}_{workspace}_".encode("utf-8"))
    digest.update(data)
    return digest.hexdigest()


def work_identity(account: str, workspace: str, data: bytes) -> WorkIdentity:
    """Build the :class:`WorkIdentity` for *data*."""
    return WorkIdentity(
        account=account,
        workspace=workspace,
        fingerprint=fingerprint(account, workspace, data),
    )
