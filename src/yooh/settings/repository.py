from __future__ import annotations

from typing import Any, Optional, Protocol


class SettingsRepository(Protocol):
    """Per-user key/value store for JSON configuration blobs."""

    def get(self, user_id: int, key: str) -> Optional[Any]:
        """Return the decoded value, or None when the key was never written."""

        raise NotImplementedError

    def put(self, user_id: int, key: str, value: Any) -> None:
        """Replace the whole value for the key."""

        raise NotImplementedError
