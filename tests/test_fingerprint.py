"""Tests for work fingerprints (core/fingerprint.py)."""

from __future__ import annotations

import hashlib

from redirect_porter.core.fingerprint import fingerprint, work_identity

DATA = b"from;to;type\n/a;/b;PERMANENT\n"


class TestFingerprint:
    def test_is_deterministic(self) -> None:
        assert fingerprint("store", "master", DATA) == fingerprint("store", "master", DATA)

    def test_one_byte_change_changes_digest(self) -> None:
        changed = DATA.replace(b"/b", b"/c")
        assert fingerprint("store", "master", DATA) != fingerprint("store", "master", changed)

    def test_account_is_part_of_identity(self) -> None:
        assert fingerprint("store", "master", DATA) != fingerprint("other", "master", DATA)

    def test_workspace_is_part_of_identity(self) -> None:
        assert fingerprint("store", "master", DATA) != fingerprint("store", "dev", DATA)

    def test_matches_md5_of_prefixed_bytes(self) -> None:
        expected = hashlib.md5(b"store_master_" + DATA).hexdigest()
        assert fingerprint("store", "master", DATA) == expected

    def test_empty_input_has_a_fingerprint(self) -> None:
        assert len(fingerprint("store", "master", b"")) == 32


class TestWorkIdentity:
    def test_carries_session_and_digest(self) -> None:
        identity = work_identity("store", "dev", DATA)
        assert identity.account == "store"
        assert identity.workspace == "dev"
        assert identity.fingerprint == fingerprint("store", "dev", DATA)
