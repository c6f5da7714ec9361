from .ansi import (
    Ansi,
    AI_LABEL,
    ANALYSIS_LABEL,
    PROMPT_LABEL,
    border,
    console,
    status,
)
from .spinner import Spinner

__all__ = [
    "Ansi",
    "AI_LABEL",
    "ANALYSIS_LABEL",
    "PROMPT_LABEL",
    "border",
    "console",
    "status",
    "Spinner",
]
