"""Colour and styling helpers built on :mod:`rich`."""

import os
from datetime import datetime

from rich.console import Console
from rich.markup import escape


console = Console(highlight=False)


class Ansi:
    """Lightweight collection of style names used throughout the app."""

    BOLD = "bold"

    FG_GREEN = "green"
    FG_CYAN = "cyan"
    FG_MAGENTA = "magenta"
    FG_YELLOW = "yellow"
    FG_RED = "red"

    # 256-colour palette for banners and menus
    GRADIENT_1 = "color(199)"
    GRADIENT_2 = "color(198)"
    GRADIENT_3 = "color(197)"
    HIGHLIGHT = "color(219)"
    SUCCESS = "color(156)"
    ALERT = "color(209)"
    ERROR = "color(196)"

    @staticmethod
    def style(text: str, *codes: str) -> str:
        """Return *text* wrapped in rich markup unless ``NO_COLOR`` is set."""
        if os.getenv("NO_COLOR") is not None:
            return text
        style = " ".join(codes)
        return f"[{style}]{text}[/]"


def border(length: int = 30, char: str = "=", *codes: str) -> str:
    line = char * length
    return Ansi.style(line, *codes) if codes else line


def status(message: str, colour: str, icon: str) -> None:
    """Print a timestamped status line."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    console.print(Ansi.style(escape(f"[{timestamp}] {icon} {message}"), colour))


# Common labels used throughout the application
PROMPT_LABEL = (
    Ansi.style("\n┌─────[", Ansi.GRADIENT_1)
    + Ansi.style("Ghostintheshell", Ansi.GRADIENT_2)
    + Ansi.style("]─[", Ansi.GRADIENT_1)
    + Ansi.style("Command", Ansi.GRADIENT_2)
    + Ansi.style("]", Ansi.GRADIENT_1)
    + Ansi.style("───────", Ansi.GRADIENT_3)
    + Ansi.style("\n└→ ", Ansi.GRADIENT_1)
)
AI_LABEL = Ansi.style("AI >>>", Ansi.FG_CYAN, Ansi.BOLD)
ANALYSIS_LABEL = Ansi.style("Analysis >>>", Ansi.FG_CYAN, Ansi.BOLD)
