from .config import ConfigStore, SearchEngine, Settings
from .errors import (
    GhostshellError,
    PersistenceError,
    ResponseFormatError,
    TransportError,
    UserInputError,
)
from .session import Conversation, Message, Role, SYSTEM_PROMPT

__all__ = [
    "ConfigStore",
    "SearchEngine",
    "Settings",
    "GhostshellError",
    "PersistenceError",
    "ResponseFormatError",
    "TransportError",
    "UserInputError",
    "Conversation",
    "Message",
    "Role",
    "SYSTEM_PROMPT",
]
