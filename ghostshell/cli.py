"""Interactive terminal chat client for a locally hosted language model.

Reads one command per line, forwards chat turns to the configured
chat-completion endpoint and can fold web search results into the
conversation.
"""
from __future__ import annotations

import logging
import readline  # noqa: F401 – side-effect: history & line editing
from pathlib import Path
from typing import Optional

import questionary
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .core import (
    ConfigStore,
    Conversation,
    GhostshellError,
    PersistenceError,
    Settings,
    UserInputError,
)
from .core.client import ChatReply, TransportClient, parse_chat_reply, parse_search_results
from .core.commands import (
    Chat,
    Clear,
    Command,
    Exit,
    Help,
    History,
    Invalid,
    LoadPrompt,
    LoadSession,
    Nsfw,
    OpenSettings,
    PickPrompt,
    SavePrompt,
    Search,
    parse_command,
)
from .core.config import MAX_TOKENS_RANGE, TEMPERATURE_RANGE, data_dir
from .core.prompts import PROMPTS_DIRNAME, load_prompts, save_prompt
from .core.session import SESSION_FILENAME
from .utils import (
    AI_LABEL,
    ANALYSIS_LABEL,
    PROMPT_LABEL,
    Ansi,
    Spinner,
    border,
    console,
    status,
)

logger = logging.getLogger(__name__)

ANALYSIS_REQUEST = "Please analyze this search result and provide insights."

MENU = [
    ("search:<query>", "Search the web for information"),
    ("chat:<question>", "Engage in conversation with the AI"),
    ("nsfw:<on/off>", "Toggle NSFW content filtering"),
    ("help", "Display detailed help information"),
    ("clear", "Clear the screen and start a new conversation"),
    ("settings", "Configure AI and search settings"),
    ("exit", "Terminate the program"),
]

EXTRA_HELP = [
    ("history", "Show the current conversation"),
    ("load", "Restore the last saved session"),
    ("prompts", "Pick a prompt template"),
    ("prompt:load:<name>", "Restart the conversation with a prompt template"),
    ("prompt:save:<name>", "Save the current system prompt as a template"),
]


def _on_off(flag: bool) -> str:
    return "ON" if flag else "OFF"


def configure_logging(debug: bool) -> None:
    """Route the package's log records through rich at the right level."""
    root = logging.getLogger("ghostshell")
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=console, show_path=False))
        root.propagate = False
    root.setLevel(logging.DEBUG if debug else logging.WARNING)


# ---------------------------------------------------------------------------
# Session loop
# ---------------------------------------------------------------------------


class GhostShell:
    """High-level orchestration class for the interactive REPL."""

    def __init__(
        self,
        settings: Settings,
        config_store: ConfigStore,
        transport: TransportClient,
        home: Optional[Path] = None,
        conversation: Optional[Conversation] = None,
    ):
        self.settings = settings
        self.config_store = config_store
        self.transport = transport
        self.home = home or data_dir()
        self.conversation = conversation or Conversation()

    @property
    def session_path(self) -> Path:
        return self.home / SESSION_FILENAME

    @property
    def prompts_dir(self) -> Path:
        return self.home / PROMPTS_DIRNAME

    # ---------------- Screens ----------------

    def show_welcome(self) -> None:
        console.clear()
        console.print(
            Panel.fit(
                Ansi.style("* Enhanced AI Terminal *", Ansi.GRADIENT_1)
                + "\n"
                + Ansi.style("Ghostintheshell", Ansi.GRADIENT_2)
                + "\n"
                + Ansi.style(f"Version {__version__}", Ansi.GRADIENT_3),
                border_style=Ansi.GRADIENT_1,
            )
        )
        self.show_menu()

    @staticmethod
    def show_menu() -> None:
        console.print(Ansi.style("\nAvailable Commands:", Ansi.HIGHLIGHT))
        for idx, (name, text) in enumerate(MENU):
            branch = "└─" if idx == len(MENU) - 1 else "├─"
            console.print(f"{Ansi.style(f' {branch} {escape(name):<18}', Ansi.GRADIENT_2)} {text}")

    @staticmethod
    def show_help() -> None:
        console.print(Ansi.style("\nHelp Menu", Ansi.GRADIENT_1))
        console.print(border())
        for idx, (name, text) in enumerate(MENU + EXTRA_HELP, start=1):
            console.print(f"{Ansi.style(f'{idx}. {escape(name):<20}', Ansi.GRADIENT_2)} {text}.")
        console.print(border())

    def show_history(self) -> None:
        console.print(Ansi.style("History:", Ansi.FG_YELLOW))
        for message in self.conversation:
            console.print(
                Ansi.style(f"  {message.role.value}: {escape(message.content)}", Ansi.FG_GREEN)
            )

    @staticmethod
    def report(exc: GhostshellError) -> None:
        status(exc.reason, Ansi.ERROR, "✗")

    # ---------------- Command handling ---------------

    def handle_line(self, line: str) -> bool:
        """Classify and run one input line. Return False to exit the REPL."""
        try:
            return self.handle_command(parse_command(line))
        except GhostshellError as exc:
            self.report(exc)
            return True

    def handle_command(self, command: Command) -> bool:
        if isinstance(command, Clear):
            self.conversation.reset()
            self.show_welcome()

        elif isinstance(command, OpenSettings):
            self.settings_menu()

        elif isinstance(command, Help):
            self.show_help()

        elif isinstance(command, Search):
            self.run_search(command.query)

        elif isinstance(command, Exit):
            try:
                self.conversation.save(self.session_path)
            except PersistenceError as exc:
                self.report(exc)
            status("Session saved. Goodbye!", Ansi.GRADIENT_1, "👋")
            return False

        elif isinstance(command, Nsfw):
            self.update_settings(self.settings.update(content_filter=command.enabled))
            state = "Enabled" if command.enabled else "Disabled"
            console.print(Ansi.style(f"NSFW Mode: {state}", Ansi.SUCCESS))

        elif isinstance(command, History):
            self.show_history()

        elif isinstance(command, LoadSession):
            self.load_session()

        elif isinstance(command, PickPrompt):
            self.pick_prompt()

        elif isinstance(command, LoadPrompt):
            self.load_prompt(command.name)

        elif isinstance(command, SavePrompt):
            path = save_prompt(self.prompts_dir, command.name, self.conversation.system_prompt)
            console.print(Ansi.style(f"Prompt saved to {escape(str(path))}.", Ansi.SUCCESS))

        elif isinstance(command, Chat):
            self.chat_turn(command.text)

        elif isinstance(command, Invalid):
            raise UserInputError(command.reason)

        return True

    # ---------------- Chat ---------------

    def _complete(self) -> Optional[ChatReply]:
        """Send the whole conversation and parse the reply; None on failure."""
        spinner = Spinner("Processing your query...", color="cyan")
        try:
            with spinner:
                body = self.transport.post_chat(self.conversation.messages, self.settings)
            reply = parse_chat_reply(body)
        except GhostshellError as exc:
            logger.debug("Chat request failed: %s", exc.reason)
            self.report(exc)
            return None
        except KeyboardInterrupt:
            console.print("\n[interrupted]", markup=False)
            return None

        if self.settings.debug:
            tokens = reply.total_tokens if reply.total_tokens is not None else "unavailable"
            console.print(Ansi.style(f"Token count: {tokens}", Ansi.FG_YELLOW))
        return reply

    def chat_turn(self, text: str) -> bool:
        self.conversation.add_user_message(text)
        reply = self._complete()
        if reply is None:
            return False
        self.conversation.add_assistant_message(reply.content)
        console.print(f"{AI_LABEL} {escape(reply.content)}")
        return True

    # ---------------- Search ---------------

    def run_search(self, query: str) -> bool:
        status(f"Starting Web Search: {query}", Ansi.HIGHLIGHT, "ℹ")
        spinner = Spinner("Searching web resources", color="magenta")
        try:
            with spinner:
                body = self.transport.get_search(
                    query,
                    safe_search=not self.settings.content_filter,
                    engine=self.settings.search_engine,
                )
            results = parse_search_results(body)
        except GhostshellError as exc:
            self.report(exc)
            return False
        except KeyboardInterrupt:
            console.print("\n[interrupted]", markup=False)
            return False

        if not results:
            console.print(Ansi.style("No related topics found for your search.", Ansi.FG_RED))
            return False

        self.show_results(results)
        selection = self.select_result(len(results))
        if selection is None:
            console.print(Ansi.style("Search cancelled.", Ansi.ALERT))
            return False
        status("Search completed successfully", Ansi.SUCCESS, "✓")

        self.conversation.add_system_message(f"Search result: {results[selection - 1]}")
        self.conversation.add_user_message(ANALYSIS_REQUEST)
        reply = self._complete()
        if reply is None:
            return False
        self.conversation.add_assistant_message(reply.content)
        console.print(f"{ANALYSIS_LABEL} {escape(reply.content)}")
        return True

    @staticmethod
    def show_results(results) -> None:
        console.print(Ansi.style("\n📚 Search Results", Ansi.SUCCESS))
        console.print(border())
        console.print(Ansi.style("Displaying top results:", Ansi.FG_YELLOW))
        for idx, text in enumerate(results, start=1):
            console.print(f"{Ansi.style(f' {idx}.', Ansi.GRADIENT_2)} {escape(text)}")
        console.print(border())

    @staticmethod
    def select_result(count: int) -> Optional[int]:
        """Block until the user picks a number in 1..count. None on EOF/Ctrl-C."""
        prompt = Ansi.style(f"Select result (1-{count}): ", Ansi.HIGHLIGHT)
        while True:
            try:
                choice_str = console.input(prompt).strip()
            except (EOFError, KeyboardInterrupt):
                console.print()
                return None
            if choice_str.isdecimal() and 1 <= int(choice_str) <= count:
                return int(choice_str)
            prompt = Ansi.style(f"Please enter a number between 1 and {count}: ", Ansi.ALERT)

    # ---------------- Settings ---------------

    def update_settings(self, settings: Settings) -> None:
        debug_changed = settings.debug != self.settings.debug
        self.settings = settings
        if debug_changed:
            configure_logging(settings.debug)
        self.config_store.save(settings)

    @staticmethod
    def _ask(prompt: str) -> str:
        try:
            return console.input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            console.print()
            raise UserInputError("No value entered.") from None

    def settings_menu(self) -> None:
        console.print(Ansi.style("\nSettings Menu", Ansi.GRADIENT_1))
        console.print(border())
        console.print(Ansi.style(f"1. NSFW Mode: {_on_off(self.settings.content_filter)}", Ansi.GRADIENT_2))
        console.print(Ansi.style(f"2. Temperature: {self.settings.temperature}", Ansi.GRADIENT_2))
        console.print(Ansi.style(f"3. Max Tokens: {self.settings.token_limit}", Ansi.GRADIENT_2))
        console.print(Ansi.style(f"4. Debug Mode: {_on_off(self.settings.debug)}", Ansi.GRADIENT_2))
        console.print(border())

        try:
            choice = console.input("Enter setting number to change (or 'x' to exit): ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print()
            return

        if choice == "x":
            console.print("Exiting settings menu.")
            return

        if choice == "1":
            self.update_settings(self.settings.update(content_filter=not self.settings.content_filter))
            console.print(Ansi.style(f"NSFW Mode: {_on_off(self.settings.content_filter)}", Ansi.SUCCESS))
        elif choice == "2":
            low, high = TEMPERATURE_RANGE
            raw = self._ask(f"Enter new temperature ({low}-{high}): ")
            self.update_settings(self.settings.with_temperature(raw))
            console.print(Ansi.style(f"Temperature: {self.settings.temperature}", Ansi.SUCCESS))
        elif choice == "3":
            low, high = MAX_TOKENS_RANGE
            raw = self._ask(f"Enter new max tokens ({low}-{high}): ")
            self.update_settings(self.settings.with_token_limit(raw))
            console.print(Ansi.style(f"Max Tokens: {self.settings.token_limit}", Ansi.SUCCESS))
        elif choice == "4":
            self.update_settings(self.settings.update(debug=not self.settings.debug))
            console.print(Ansi.style(f"Debug Mode: {_on_off(self.settings.debug)}", Ansi.SUCCESS))
        else:
            raise UserInputError("Invalid choice. Please try again.")

    # ---------------- Sessions & prompts ---------------

    def load_session(self) -> None:
        try:
            self.conversation.load(self.session_path)
        except FileNotFoundError:
            console.print(Ansi.style("No saved session found.", Ansi.FG_RED))
            return
        status(f"Restored {len(self.conversation)} messages", Ansi.SUCCESS, "✓")
        self.show_history()

    def load_prompt(self, name: str) -> None:
        prompts = load_prompts(self.prompts_dir)
        if name not in prompts:
            raise UserInputError(f"Prompt '{name}' not found.")
        self.conversation.reset(system_prompt=prompts[name])
        console.print(Ansi.style(f"Prompt '{escape(name)}' loaded, conversation restarted.", Ansi.SUCCESS))

    def pick_prompt(self) -> None:
        names = sorted(load_prompts(self.prompts_dir))
        try:
            selection = questionary.select("Select a prompt:", choices=names).ask()
        except (KeyboardInterrupt, EOFError):
            console.print()
            return
        if selection:
            self.load_prompt(selection)

    # ---------------- Interaction loop ---------------

    def repl(self) -> None:
        """Run the interactive read–eval–print-loop."""
        self.show_welcome()

        while True:
            try:
                line = console.input(PROMPT_LABEL)
            except (EOFError, KeyboardInterrupt):
                console.print("\n[signal caught – exiting]", markup=False)
                self.handle_command(Exit())
                break

            if not self.handle_line(line):
                break


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def run_cli() -> int:  # pragma: no cover
    configure_logging(debug=False)
    store = ConfigStore()
    settings = store.load()
    configure_logging(settings.debug)

    GhostShell(settings, store, TransportClient()).repl()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run_cli())
