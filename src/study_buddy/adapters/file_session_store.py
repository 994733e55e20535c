"""JSON file storage for the persisted session token."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from study_buddy.domain.models import SessionTokens
from study_buddy.services.sessions import SessionStore

_logger = logging.getLogger(__name__)


@dataclass
class FileSessionStore(SessionStore):
    """Keeps session tokens in a small JSON file on local disk."""

    path: Path

    def load(self) -> SessionTokens | None:
        """Return stored tokens; unreadable files count as no session."""
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return SessionTokens(
                access_token=str(payload["access_token"]),
                refresh_token=str(payload["refresh_token"]),
            )
        except (OSError, ValueError, KeyError, TypeError):
            _logger.warning("Ignoring unreadable session file: %s", self.path)
            return None

    def save(self, tokens: SessionTokens) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(
                {
                    "access_token": tokens.access_token,
                    "refresh_token": tokens.refresh_token,
                }
            ),
            encoding="utf-8",
        )

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
