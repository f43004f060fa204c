# Remembers the last signed-in token so a restart can restore the session
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

APP_NAME = "SecurePass"


def get_app_data_path() -> Path:
    home = Path.home()

    if sys.platform == "win32":
        # C:\Users\Name\AppData\Roaming\SecurePass
        path = home / "AppData" / "Roaming" / APP_NAME
    else:
        # ~/.local/share/SecurePass
        path = home / ".local" / "share" / APP_NAME

    path.mkdir(parents=True, exist_ok=True)
    return path


class CachedSession(BaseModel):
    server_url: str
    email: str
    token: str


class SessionCache:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_app_data_path() / "session.json"

    def load(self) -> Optional[CachedSession]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return CachedSession.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable session cache %s: %s", self.path, e)
            return None

    def save(self, cached: CachedSession):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # the token grants vault access: owner-only file
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(cached.model_dump(), f, indent=2)

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
