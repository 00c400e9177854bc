"""
Application session: persisted UI settings plus the set of logged-out tokens.

Created once on app start-up and handed to routes through FastAPI
dependencies instead of being read from ambient storage.
"""

import json
import logging
import time
from pathlib import Path
from typing import Callable, Dict, Union

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class AppSettings(BaseModel):
    hide_salon: bool = False


class SettingsStore:
    """Key-value settings kept as a small JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> AppSettings:
        if not self.path.exists():
            return AppSettings()
        try:
            stored = json.loads(self.path.read_text(encoding="utf-8"))
            return AppSettings(**{**AppSettings().model_dump(), **stored})
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.error(f"Error loading settings from {self.path}: {e}")
            return AppSettings()

    def save(self, settings: AppSettings) -> None:
        self.path.write_text(json.dumps(settings.model_dump()), encoding="utf-8")
        logger.info(f"Settings saved to {self.path}")


class AppSession:
    def __init__(self, store: SettingsStore, clock: Callable[[], float] = time.time):
        self.store = store
        self._clock = clock
        self.settings = AppSettings()
        # jti -> token expiry (epoch seconds)
        self._revoked_tokens: Dict[str, float] = {}

    def init(self) -> None:
        """Load settings and start with no revoked tokens."""
        self.settings = self.store.load()
        self._revoked_tokens.clear()
        logger.info(f"Session initialised with settings {self.settings.model_dump()}")

    def update_settings(self, settings: AppSettings) -> AppSettings:
        self.store.save(settings)
        self.settings = settings
        return settings

    def clear(self, token_id: str, expires_at: float) -> None:
        """Forget a login: the token is refused until it would have expired anyway."""
        self._forget_expired()
        self._revoked_tokens[token_id] = expires_at

    def is_revoked(self, token_id: str) -> bool:
        self._forget_expired()
        return token_id in self._revoked_tokens

    def _forget_expired(self) -> None:
        now = self._clock()
        for token_id in [t for t, exp in self._revoked_tokens.items() if exp <= now]:
            del self._revoked_tokens[token_id]
