"""Settings value type and the JSON file it is persisted to."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import PersistenceError, UserInputError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

TEMPERATURE_RANGE = (0.0, 2.0)
MAX_TOKENS_RANGE = (1, 32768)


def data_dir() -> Path:
    """Directory holding the config, session snapshot and prompt files."""
    home = os.getenv("GHOSTSHELL_HOME")
    return Path(home) if home else Path.cwd()


class SearchEngine(str, Enum):
    GOOGLE = "google"
    BING = "bing"
    DUCKDUCKGO = "duckduckgo"

    @classmethod
    def from_value(cls, value: Any) -> "SearchEngine":
        """Accept the string key, or the integer index older config files used."""
        if isinstance(value, int) and not isinstance(value, bool):
            members = list(cls)
            if 0 <= value < len(members):
                return members[value]
            raise ValueError(f"unknown search engine index {value}")
        return cls(str(value).lower())


@dataclass(frozen=True)
class Settings:
    """Immutable settings record. Use :meth:`update` to derive a changed copy."""

    endpoint: str = "http://127.0.0.1:9003/v1/chat/completions"
    token_limit: int = 1000
    temperature: float = 0.7
    debug: bool = False
    search_engine: SearchEngine = SearchEngine.DUCKDUCKGO
    # True when nsfw mode is on; web searches then run with safe-search off.
    content_filter: bool = True

    def update(self, **changes: Any) -> "Settings":
        return replace(self, **changes)

    def with_temperature(self, raw: str) -> "Settings":
        try:
            value = float(raw)
        except ValueError:
            raise UserInputError(f"'{raw}' is not a number.") from None
        low, high = TEMPERATURE_RANGE
        if not low <= value <= high:
            raise UserInputError(f"Temperature must be between {low} and {high}.")
        return self.update(temperature=value)

    def with_token_limit(self, raw: str) -> "Settings":
        try:
            value = int(raw)
        except ValueError:
            raise UserInputError(f"'{raw}' is not a whole number.") from None
        low, high = MAX_TOKENS_RANGE
        if not low <= value <= high:
            raise UserInputError(f"Max tokens must be between {low} and {high}.")
        return self.update(token_limit=value)

    def to_json(self) -> Dict[str, Any]:
        return {
            "server_url": self.endpoint,
            "max_tokens": self.token_limit,
            "temperature": self.temperature,
            "debug_mode": self.debug,
            "search_engine": self.search_engine.value,
            "nsfw_mode": self.content_filter,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Settings":
        defaults = asdict(cls())
        try:
            return cls(
                endpoint=str(data.get("server_url", defaults["endpoint"])),
                token_limit=int(data.get("max_tokens", defaults["token_limit"])),
                temperature=float(data.get("temperature", defaults["temperature"])),
                debug=bool(data.get("debug_mode", defaults["debug"])),
                search_engine=SearchEngine.from_value(
                    data.get("search_engine", defaults["search_engine"].value)
                ),
                content_filter=bool(data.get("nsfw_mode", defaults["content_filter"])),
            )
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Invalid value in config file: {exc}") from exc


class ConfigStore:
    """Loads and saves :class:`Settings` as a JSON object on disk."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or data_dir() / CONFIG_FILENAME

    def load(self) -> Settings:
        if not self.path.exists():
            settings = Settings()
            logger.debug("No config at %s, writing defaults", self.path)
            self.save(settings)
            return settings

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read %s (%s); using defaults", self.path, exc)
            return Settings()
        if not isinstance(data, dict):
            logger.warning("Config %s is not a JSON object; using defaults", self.path)
            return Settings()

        try:
            return Settings.from_json(data)
        except PersistenceError as exc:
            logger.warning("%s; using defaults", exc.reason)
            return Settings()

    def save(self, settings: Settings) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(settings.to_json(), indent=4), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            raise PersistenceError(f"Unable to save {self.path}: {exc}") from exc
        logger.debug("Settings saved to %s", self.path)
