import unittest
from unittest.mock import patch

from ghostshell.utils import Spinner, console


@patch("ghostshell.utils.spinner.yaspin")
class TestSpinner(unittest.TestCase):
    def setUp(self):
        self.quiet_patcher = patch.object(console, "quiet", True)
        self.quiet_patcher.start()

    def tearDown(self):
        self.quiet_patcher.stop()

    def test_start_stop(self, mock_yaspin):
        spinner = Spinner("Processing your query...", color="cyan")
        self.assertEqual(mock_yaspin.call_args[1], {"text": "Processing your query...", "color": "cyan"})

        spinner.start()
        self.assertTrue(spinner.running)
        mock_yaspin.return_value.start.assert_called_once()

        spinner.stop()
        self.assertFalse(spinner.running)
        mock_yaspin.return_value.stop.assert_called_once()

    def test_only_one_indicator_at_a_time(self, mock_yaspin):
        first = Spinner("one")
        second = Spinner("two")
        first.start()
        try:
            with self.assertRaises(RuntimeError):
                second.start()
        finally:
            first.stop()

        with second:
            self.assertTrue(second.running)
        self.assertFalse(second.running)

    def test_stop_runs_even_when_body_raises(self, mock_yaspin):
        spinner = Spinner("boom")
        with self.assertRaises(ValueError):
            with spinner:
                raise ValueError("request failed")
        self.assertFalse(spinner.running)
        mock_yaspin.return_value.stop.assert_called_once()

    def test_stop_without_start_is_noop(self, mock_yaspin):
        Spinner("idle").stop()
        mock_yaspin.return_value.stop.assert_not_called()


if __name__ == "__main__":
    unittest.main()
