"""On-disk persistence for the client session.

Learn: The token and the user projection live in ONE JSON document,
so they are written and removed together. Writes go to a temp file
in the same directory and are moved into place with os.replace(),
which is atomic on POSIX and Windows; a reader never sees half a
session.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

import structlog

logger = structlog.get_logger()


class SessionStorage:
    """Reads and writes the ``{"token": ..., "user": {...}}`` document."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def load(self) -> dict:
        """Return the stored document, or {} if absent or unreadable."""
        with self._lock:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return {}
            except OSError as e:
                logger.warning("session.storage_unreadable", path=str(self.path), error=str(e))
                return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("session.storage_corrupt", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def token(self) -> Optional[str]:
        token = self.load().get("token")
        return token if isinstance(token, str) and token else None

    def save(self, token: str, user: dict) -> None:
        payload = json.dumps({"token": token, "user": user})
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".session-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.chmod(tmp, 0o600)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)
