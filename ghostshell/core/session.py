"""Conversation state and the session snapshot file."""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import PersistenceError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a powerful AI assistant with advanced capabilities."

SESSION_FILENAME = "session_history.json"


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_json(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class Conversation:
    """Ordered, role-tagged message history for one session.

    The first message is always a system message. Apart from :meth:`reset`
    and :meth:`restore` the history only ever grows at the end.
    """

    def __init__(self, system_prompt: str = SYSTEM_PROMPT):
        self.system_prompt = system_prompt
        self._messages: List[Message] = []
        self.reset()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    def __getitem__(self, index):
        return self._messages[index]

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    def append(self, message: Message) -> None:
        if not isinstance(message.role, Role) or message.content is None:
            raise ValueError("message needs a role and content")
        self._messages.append(message)

    def add_system_message(self, content: str) -> None:
        self.append(Message(Role.SYSTEM, content))

    def add_user_message(self, content: str) -> None:
        self.append(Message(Role.USER, content))

    def add_assistant_message(self, content: str) -> None:
        self.append(Message(Role.ASSISTANT, content))

    def reset(self, system_prompt: Optional[str] = None) -> None:
        """Drop everything and reseed with a single system message."""
        if system_prompt is not None:
            self.system_prompt = system_prompt
        self._messages = [Message(Role.SYSTEM, self.system_prompt)]

    def snapshot(self) -> List[Dict[str, str]]:
        return [m.to_json() for m in self._messages]

    def restore(self, data: Any) -> None:
        """Replace the whole history with a previously taken snapshot."""
        if not isinstance(data, list):
            raise PersistenceError("Session snapshot must be a JSON array.")

        restored: List[Message] = []
        for idx, item in enumerate(data):
            if not isinstance(item, dict) or not isinstance(item.get("content"), str):
                raise PersistenceError(f"Malformed message at position {idx}.")
            try:
                role = Role(item.get("role"))
            except ValueError:
                raise PersistenceError(
                    f"Unknown role {item.get('role')!r} at position {idx}."
                ) from None
            restored.append(Message(role, item["content"]))

        if not restored:
            self.reset()
            return
        self._messages = restored
        if restored[0].role is Role.SYSTEM:
            self.system_prompt = restored[0].content

    # ------------------------------------------------------------------
    # Snapshot file
    # ------------------------------------------------------------------

    def save(self, path: Path) -> None:
        tmp_path = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(self.snapshot(), ensure_ascii=False, indent=4),
                encoding="utf-8",
            )
            tmp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to save session to {path}: {exc}") from exc
        logger.debug("Saved %d messages to %s", len(self), path)

    def load(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"No saved session found at {path}.")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Unable to read session file {path}: {exc}") from exc
        self.restore(data)
        logger.debug("Restored %d messages from %s", len(self), path)
