import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = os.path.join("data", "spotify_state.json")

CODE_VERIFIER_KEY = "spotify_code_verifier"
ACCESS_TOKEN_KEY = "spotify_access_token"


class LocalStorage:
    """Small string key-value store persisted as a JSON object on disk.

    Plays the role a browser's localStorage plays for a web client: values
    survive restarts until removed. With ``persistent=False`` nothing touches
    the disk and values only live as long as this object.
    """

    def __init__(self, *, path: str = DEFAULT_STATE_PATH, persistent: bool = True):
        self.path = path
        self.persistent = persistent
        self._memory: Dict[str, str] = {}

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LocalStorage":
        config = config or {}
        return cls(
            path=str(config.get("spotify_state_file") or DEFAULT_STATE_PATH),
            persistent=bool(config.get("spotify_cache_tokens", True)),
        )

    def _read(self) -> Dict[str, str]:
        if not self.persistent:
            return dict(self._memory)

        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: expected a JSON object", self.path)
            return {}

        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        if not self.persistent:
            self._memory = dict(data)
            return

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if value else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
