"""
Token Store - persists the Google OAuth tokens as JSON on disk.

The display has a single Google account, so one file holds everything:
DATA_DIR/tokens/token.json.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from app.core.config import settings
from app.environments.base import OAuthTokens


logger = logging.getLogger("wallcal.services.token_store")


class TokenStore:
    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        return self._path or settings.token_path

    def load(self) -> Optional[OAuthTokens]:
        """Return the stored tokens, or None when missing or unreadable."""
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return OAuthTokens.from_dict(data)
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None

    def save(self, tokens: OAuthTokens) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(tokens.to_dict(), indent=2), encoding="utf-8")
        logger.info("Token saved successfully")

    def clear(self) -> bool:
        """Delete the token file. Returns False when there was nothing to delete."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Stored token removed")
        return True
