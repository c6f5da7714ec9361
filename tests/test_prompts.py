import json
from unittest.mock import patch

from ghostshell.core import Role, UserInputError
from ghostshell.core.prompts import DEFAULT_PROMPT, load_prompts, save_prompt
from .test_base import BaseGhostshellTest


class PiratePromptTest(BaseGhostshellTest):
    def setUp(self):
        super().setUp()
        self.prompts_dir = self.home / "prompts"
        self.prompts_dir.mkdir()
        (self.prompts_dir / "pirate.json").write_text(
            json.dumps({"role": "system", "content": "Talk like a pirate."})
        )


class TestPromptFiles(PiratePromptTest):
    def test_load_prompts(self):
        (self.prompts_dir / "broken.json").write_text("{")
        (self.prompts_dir / "notes.txt").write_text("ignored")
        prompts = load_prompts(self.prompts_dir)
        self.assertEqual(prompts, {"default": DEFAULT_PROMPT, "pirate": "Talk like a pirate."})

    def test_missing_directory_has_default(self):
        self.assertEqual(load_prompts(self.home / "nowhere"), {"default": DEFAULT_PROMPT})

    def test_save_prompt(self):
        path = save_prompt(self.prompts_dir, "terse", "Be brief.")
        self.assertEqual(json.loads(path.read_text()), {"role": "system", "content": "Be brief."})
        self.assertEqual(load_prompts(self.prompts_dir)["terse"], "Be brief.")

    def test_save_prompt_rejects_paths(self):
        for name in ("../evil", "a/b", ".hidden"):
            with self.assertRaises(UserInputError):
                save_prompt(self.prompts_dir, name, "x")


class TestPromptCommands(PiratePromptTest):
    def test_prompt_load_restarts_conversation(self):
        self.shell.conversation.add_user_message("Hello")
        self.shell.handle_line("prompt:load:pirate")

        self.assertEqual(self.shell.conversation.snapshot(), [{"role": "system", "content": "Talk like a pirate."}])
        self.shell.handle_line("clear")
        self.assertEqual(self.shell.conversation[0].content, "Talk like a pirate.")

    def test_unknown_prompt_is_reported(self):
        self.shell.conversation.add_user_message("Hello")
        with patch.object(self.shell, "report") as mock_report:
            self.shell.handle_line("prompt:load:ninja")
        mock_report.assert_called_once()
        self.assertEqual(len(self.shell.conversation), 2)

    def test_prompt_save_writes_current_system_prompt(self):
        self.shell.handle_line("prompt:save:current")
        self.assertEqual(load_prompts(self.prompts_dir)["current"], self.shell.conversation.system_prompt)

    @patch("ghostshell.cli.questionary.select")
    def test_prompt_picker(self, mock_select):
        """Interactive prompt selection uses questionary"""
        mock_select.return_value.ask.return_value = "pirate"

        self.shell.handle_line("prompts")

        mock_select.assert_called_once()
        self.assertEqual(mock_select.call_args[1]["choices"], ["default", "pirate"])
        self.assertEqual(self.shell.conversation[0].content, "Talk like a pirate.")

    @patch("ghostshell.cli.questionary.select")
    def test_prompt_picker_cancelled(self, mock_select):
        mock_select.return_value.ask.return_value = None
        self.shell.conversation.add_user_message("Hello")
        self.shell.handle_line("prompts")
        self.assertEqual(len(self.shell.conversation), 2)


class TestLoadSession(BaseGhostshellTest):
    def test_load_restores_saved_snapshot(self):
        self.shell.conversation.add_user_message("Hello")
        self.shell.conversation.add_assistant_message("Hi there!")
        self.shell.handle_line("exit")
        saved = self.shell.conversation.snapshot()

        self.shell.conversation.reset()
        self.shell.handle_line("load")

        self.assertEqual(self.shell.conversation.snapshot(), saved)
        self.assertEqual(self.shell.conversation[2].role, Role.ASSISTANT)

    def test_load_without_snapshot(self):
        self.shell.conversation.add_user_message("Hello")
        self.assertTrue(self.shell.handle_line("load"))
        self.assertEqual(len(self.shell.conversation), 2)

    def test_load_corrupt_snapshot(self):
        (self.home / "session_history.json").write_text('[{"role": "robot"}]')
        with patch.object(self.shell, "report") as mock_report:
            self.shell.handle_line("load")
        mock_report.assert_called_once()
        self.assertEqual(len(self.shell.conversation), 1)
