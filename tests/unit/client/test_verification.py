"""Unit tests for the client-side verification tracker."""

from pathlib import Path

import orjson

from client.verification import (
    FileMarkerStore,
    InMemoryMarkerStore,
    VerificationState,
    VerificationTracker,
)


class TestVerificationTracker:
    def test_unknown_uid_has_no_state(self):
        assert VerificationTracker().state("u1") is None

    def test_unverified_then_verified_fires_once(self):
        tracker = VerificationTracker()

        assert tracker.observe("u1", False) == VerificationState.UNVERIFIED
        assert tracker.observe("u1", True) == VerificationState.JUST_VERIFIED
        assert tracker.just_verified("u1")

        # Re-reads before acknowledging keep the signal
        assert tracker.observe("u1", True) == VerificationState.JUST_VERIFIED

        tracker.acknowledge("u1")
        assert tracker.state("u1") == VerificationState.ACKNOWLEDGED
        assert tracker.observe("u1", True) == VerificationState.ACKNOWLEDGED
        assert not tracker.just_verified("u1")

    def test_verified_without_marker_never_fires(self):
        tracker = VerificationTracker()

        assert tracker.observe("u1", True) == VerificationState.ACKNOWLEDGED
        assert not tracker.just_verified("u1")

    def test_signup_marks_unverified(self):
        tracker = VerificationTracker()

        tracker.mark_unverified("u1")

        assert tracker.observe("u1", True) == VerificationState.JUST_VERIFIED

    def test_acknowledge_is_noop_in_other_states(self):
        tracker = VerificationTracker()
        tracker.observe("u1", False)

        tracker.acknowledge("u1")

        assert tracker.state("u1") == VerificationState.UNVERIFIED

    def test_marker_survives_forget(self):
        markers = InMemoryMarkerStore()
        tracker = VerificationTracker(markers)
        tracker.observe("u1", False)

        tracker.forget("u1")

        assert tracker.state("u1") is None
        assert markers.has("u1")
        assert tracker.observe("u1", True) == VerificationState.JUST_VERIFIED

    def test_uids_are_independent(self):
        tracker = VerificationTracker()
        tracker.observe("u1", False)

        assert tracker.observe("u2", True) == VerificationState.ACKNOWLEDGED
        assert tracker.observe("u1", True) == VerificationState.JUST_VERIFIED


class TestFileMarkerStore:
    def test_persists_across_instances(self, tmp_path: Path):
        path = tmp_path / "state" / "markers.json"
        VerificationTracker(FileMarkerStore(path)).observe("u1", False)

        # A new process reading the same file still detects the transition
        tracker = VerificationTracker(FileMarkerStore(path))

        assert tracker.observe("u1", True) == VerificationState.JUST_VERIFIED
        assert orjson.loads(path.read_bytes()) == []

    def test_missing_file_is_empty(self, tmp_path: Path):
        store = FileMarkerStore(tmp_path / "missing.json")

        assert not store.has("u1")
        store.discard("u1")
        assert not (tmp_path / "missing.json").exists()

    def test_writes_sorted_list(self, tmp_path: Path):
        store = FileMarkerStore(tmp_path / "markers.json")

        store.add("b")
        store.add("a")
        store.add("a")

        assert orjson.loads((tmp_path / "markers.json").read_bytes()) == ["a", "b"]
