"""Client-side email verification tracking.

A uid is marked "was unverified" whenever a session loads with the verified
flag false. The first later session load that reads verified=true while the
marker is present yields JUST_VERIFIED (so the UI can send the user on to
profile completion) and clears the marker. The consumer then acknowledges,
and the signal cannot fire again for the same verification.

The identity provider's verified flag stays authoritative; this state only
exists to detect the transition once.
"""

from enum import StrEnum
from pathlib import Path
from typing import Protocol

import orjson


class VerificationState(StrEnum):
    """Local verification states for one uid."""

    UNVERIFIED = "unverified"
    JUST_VERIFIED = "just_verified"
    ACKNOWLEDGED = "acknowledged"


class IMarkerStore(Protocol):
    """Persisted set of uids last seen unverified."""

    def has(self, uid: str) -> bool: ...

    def add(self, uid: str) -> None: ...

    def discard(self, uid: str) -> None: ...


class InMemoryMarkerStore:
    """Marker store that lives as long as the process."""

    def __init__(self) -> None:
        self._uids: set[str] = set()

    def has(self, uid: str) -> bool:
        return uid in self._uids

    def add(self, uid: str) -> None:
        self._uids.add(uid)

    def discard(self, uid: str) -> None:
        self._uids.discard(uid)


class FileMarkerStore:
    """Marker store persisted as a JSON list in a file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def has(self, uid: str) -> bool:
        return uid in self._load()

    def add(self, uid: str) -> None:
        uids = self._load()
        if uid not in uids:
            uids.add(uid)
            self._save(uids)

    def discard(self, uid: str) -> None:
        uids = self._load()
        if uid in uids:
            uids.remove(uid)
            self._save(uids)

    def _load(self) -> set[str]:
        if not self._path.exists():
            return set()
        content = self._path.read_bytes()
        return set(orjson.loads(content)) if content else set()

    def _save(self, uids: set[str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(orjson.dumps(sorted(uids)))


class VerificationTracker:
    """Per-uid UNVERIFIED -> JUST_VERIFIED -> ACKNOWLEDGED state machine."""

    def __init__(self, markers: IMarkerStore | None = None) -> None:
        self._markers = markers or InMemoryMarkerStore()
        self._states: dict[str, VerificationState] = {}

    def state(self, uid: str) -> VerificationState | None:
        """Current state for ``uid``, None before any session was observed."""
        return self._states.get(uid)

    def mark_unverified(self, uid: str) -> None:
        """Record that ``uid`` is currently unverified (signup, unverified session)."""
        self._markers.add(uid)
        self._states[uid] = VerificationState.UNVERIFIED

    def observe(self, uid: str, email_verified: bool) -> VerificationState:
        """Feed the verified flag read on a session load or auth-state change."""
        if not email_verified:
            self.mark_unverified(uid)
            return VerificationState.UNVERIFIED

        if self._markers.has(uid):
            self._markers.discard(uid)
            self._states[uid] = VerificationState.JUST_VERIFIED
        elif self._states.get(uid) != VerificationState.JUST_VERIFIED:
            self._states[uid] = VerificationState.ACKNOWLEDGED
        return self._states[uid]

    def just_verified(self, uid: str) -> bool:
        return self._states.get(uid) == VerificationState.JUST_VERIFIED

    def acknowledge(self, uid: str) -> None:
        """Consume the JUST_VERIFIED signal."""
        if self._states.get(uid) == VerificationState.JUST_VERIFIED:
            self._states[uid] = VerificationState.ACKNOWLEDGED

    def forget(self, uid: str) -> None:
        """Drop in-memory state on sign-out; the persisted marker is kept."""
        self._states.pop(uid, None)
