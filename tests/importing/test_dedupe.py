from __future__ import annotations

from pyqbank.extraction.normalization import stem_fingerprint
from pyqbank.importing.dedupe import DUPLICATE_REASON, StemFingerprintRegistry


def test_formatting_variants_share_a_fingerprint() -> None:
    assert stem_fingerprint("Find  the\nvalue of X") == stem_fingerprint("find the value of x")
    assert stem_fingerprint("find the value of x") != stem_fingerprint("find the value of y")


def test_registry_only_flags_remembered_fingerprints() -> None:
    registry = StemFingerprintRegistry()

    first = registry.evaluate("Find the value of x")
    assert first.is_duplicate is False
    assert first.reason is None
    assert registry.evaluate("find the value of x").is_duplicate is False

    registry.remember(first.fingerprint)
    second = registry.evaluate("FIND the value of x")

    assert second.is_duplicate is True
    assert second.reason == DUPLICATE_REASON


def test_registry_consults_stored_lookup() -> None:
    stored = {stem_fingerprint("Already stored")}
    registry = StemFingerprintRegistry(stored.__contains__)

    assert registry.evaluate("already   stored").is_duplicate is True
    assert registry.evaluate("brand new").is_duplicate is False
