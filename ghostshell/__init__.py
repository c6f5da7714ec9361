"""Ghostintheshell: a terminal chat client for a locally hosted language model.

Features
--------
1. Chat turns are sent, with the whole conversation as context, to an
   OpenAI-compatible chat-completion endpoint (``server_url`` in config.json).
2. ``search:<query>`` looks the query up on the web, lets you pick one result
   and asks the model to analyse it.
3. Settings live in config.json and the conversation is written to
   session_history.json on exit (``load`` brings it back).

Run ``python -m ghostshell`` or the ``ghostshell`` console script.
"""

__version__ = "2.0.0"

# Re-export useful symbols for convenience
from .core import Conversation, Settings, SYSTEM_PROMPT
from .core.client import TransportClient
from .cli import GhostShell, run_cli

__all__ = [
    "Conversation",
    "Settings",
    "SYSTEM_PROMPT",
    "TransportClient",
    "GhostShell",
    "run_cli",
]
