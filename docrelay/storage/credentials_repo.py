"""File-based storage for saved browser sessions."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.@-]+$")


class InvalidIdError(ValueError):
    """A user id or platform key that cannot be used as a path segment."""


class CredentialsRepo:
    """File-based storage in data/credentials/ directory.

    Each session blob is stored as: data/credentials/{user_id}/{platform}.json
    The file holds {"platform", "userId", "authState", "updatedAt"}.
    """

    def __init__(self, base_dir: str | Path | None = None):
        if base_dir is None:
            base_dir = Path("data/credentials")
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _check_id(self, value: str, what: str) -> str:
        if not value or not _SAFE_ID.match(value) or value in (".", ".."):
            raise InvalidIdError(f"Invalid {what} {value!r}")
        return value

    def _path(self, user_id: str, platform: str) -> Path:
        user_id = self._check_id(user_id, "user id")
        platform = self._check_id(platform, "platform")
        return self.base_dir / user_id / f"{platform}.json"

    def get(self, user_id: str, platform: str) -> dict | None:
        """Load the saved session blob. Returns None if not found."""
        path = self._path(user_id, platform)
        if not path.exists():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        return data.get("authState")

    def exists(self, user_id: str, platform: str) -> bool:
        return self._path(user_id, platform).exists()

    def save(self, user_id: str, platform: str, auth_state: dict) -> str:
        """Insert or overwrite the session blob. Returns the update timestamp."""
        path = self._path(user_id, platform)
        path.parent.mkdir(parents=True, exist_ok=True)
        updated_at = datetime.now(timezone.utc).isoformat()
        record = {
            "userId": user_id,
            "platform": platform,
            "authState": auth_state,
            "updatedAt": updated_at,
        }
        path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")
        return updated_at

    def delete(self, user_id: str, platform: str) -> bool:
        """Delete a saved session. Returns True if deleted, False if not found."""
        path = self._path(user_id, platform)
        if path.exists():
            path.unlink()
            return True
        return False

    def list_platforms(self, user_id: str) -> list[str]:
        """List platforms with a saved session for ``user_id``."""
        user_dir = self.base_dir / self._check_id(user_id, "user id")
        if not user_dir.is_dir():
            return []
        return [p.stem for p in sorted(user_dir.glob("*.json"))]
