"""Client-side identity for anonymous voters.

This module derives the identity bundle a browsing context attaches to its
votes, without any login:

- a session token kept in client storage (weakest signal: lost whenever the
  storage is cleared),
- a device fingerprint from an injected fingerprinting source, with a local
  hash over basic device characteristics as fallback,
- a "voted" list that gives instant feedback in the UI.

Nothing here is authoritative; the server re-checks every vote.
"""

from __future__ import annotations

import hashlib
import json
import logging
import secrets
import string
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from chili_cookoff.core.context import IdentityBundle

logger = logging.getLogger(__name__)

SESSION_KEY = "chili_voter_session"
VOTED_KEY = "voted_chilis"
FINGERPRINT_KEY = "chili_device_fingerprint"

_BASE36 = string.digits + string.ascii_lowercase

FingerprintSource = Callable[[], str]


class ClientStorage(Protocol):
    """Persistent key-value storage scoped to one browser profile."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """ClientStorage kept in a dict, for kiosks, scripts and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


@dataclass(frozen=True)
class DeviceCharacteristics:
    """Basic traits used by the local fallback fingerprint."""

    user_agent: str = ""
    language: str = ""
    screen_width: int = 0
    screen_height: int = 0
    color_depth: int = 0
    timezone_offset_minutes: int = 0
    local_storage: bool = True
    session_storage: bool = True

    def canonical(self) -> str:
        return "|".join(
            [
                self.user_agent,
                self.language,
                f"{self.screen_width}x{self.screen_height}x{self.color_depth}",
                str(self.timezone_offset_minutes),
                "ls" if self.local_storage else "-",
                "ss" if self.session_storage else "-",
            ]
        )


def local_fingerprint(characteristics: DeviceCharacteristics) -> str:
    """Return a SHA-256 hex digest over the device characteristics."""
    return hashlib.sha256(characteristics.canonical().encode("utf-8")).hexdigest()


def new_session_id(now: float | None = None) -> str:
    """Return ``session_<epoch millis>_<9 base36 chars>``."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"session_{millis}_{suffix}"


class IdentityProvider:
    """Best-effort stable identity for the current browsing context.

    One provider corresponds to one page load: the fingerprint is computed at
    most once per instance.
    """

    def __init__(
        self,
        storage: ClientStorage,
        *,
        fingerprint_source: FingerprintSource | None = None,
        characteristics: DeviceCharacteristics | None = None,
    ) -> None:
        self.storage = storage
        self.fingerprint_source = fingerprint_source
        self.characteristics = characteristics
        self._fingerprint: str | None = None

    def get_session_id(self) -> str:
        """Return the stored session token, creating one if needed."""
        session_id = self.storage.get(SESSION_KEY)
        if not session_id:
            session_id = new_session_id()
            self.storage.set(SESSION_KEY, session_id)
        return session_id

    def get_device_fingerprint(self) -> str | None:
        """Return the device fingerprint, or None if every method failed."""
        if self._fingerprint is not None:
            return self._fingerprint

        fingerprint = self.storage.get(FINGERPRINT_KEY) or self._compute_fingerprint()
        if fingerprint:
            self._fingerprint = fingerprint
            self.storage.set(FINGERPRINT_KEY, fingerprint)
        return fingerprint

    def _compute_fingerprint(self) -> str | None:
        if self.fingerprint_source is not None:
            try:
                value = self.fingerprint_source()
            except Exception as exc:  # noqa: BLE001 - third-party source
                logger.warning("Primary fingerprinting failed, using local fallback: %s", exc)
            else:
                if value:
                    return value

        if self.characteristics is None:
            return None
        return local_fingerprint(self.characteristics)

    def _voted(self) -> list[str]:
        raw = self.storage.get(VOTED_KEY)
        if not raw:
            return []
        try:
            voted = json.loads(raw)
        except ValueError:
            return []
        return [str(item) for item in voted] if isinstance(voted, list) else []

    def has_voted(self, entry_id: str) -> bool:
        return entry_id in self._voted()

    def mark_voted(self, entry_id: str) -> None:
        voted = self._voted()
        if entry_id not in voted:
            voted.append(entry_id)
            self.storage.set(VOTED_KEY, json.dumps(voted))

    def voted_entries(self) -> list[str]:
        return self._voted()

    def clear_session(self) -> None:
        """Forget the session token, voted list and cached fingerprint."""
        for key in (SESSION_KEY, VOTED_KEY, FINGERPRINT_KEY):
            self.storage.remove(key)
        self._fingerprint = None

    def session_info(self) -> dict[str, object]:
        voted = self._voted()
        return {
            "session_id": self.get_session_id(),
            "voted_count": len(voted),
            "voted_entries": voted,
        }

    def identity_bundle(self, ip_address: str | None = None) -> IdentityBundle:
        return IdentityBundle(
            session_id=self.get_session_id(),
            device_fingerprint=self.get_device_fingerprint(),
            ip_address=ip_address,
        )
