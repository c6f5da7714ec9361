import dataclasses
import json
import tempfile
import unittest
from pathlib import Path

from ghostshell.core import ConfigStore, SearchEngine, Settings, UserInputError


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = Settings()
        self.assertEqual(settings.endpoint, "http://127.0.0.1:9003/v1/chat/completions")
        self.assertEqual(settings.token_limit, 1000)
        self.assertEqual(settings.temperature, 0.7)
        self.assertFalse(settings.debug)
        self.assertIs(settings.search_engine, SearchEngine.DUCKDUCKGO)
        self.assertTrue(settings.content_filter)

    def test_update_returns_new_value(self):
        settings = Settings()
        changed = settings.update(debug=True)
        self.assertTrue(changed.debug)
        self.assertFalse(settings.debug)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            settings.debug = True

    def test_temperature_bounds(self):
        settings = Settings()
        self.assertEqual(settings.with_temperature("1.5").temperature, 1.5)
        self.assertEqual(settings.with_temperature("0").temperature, 0.0)
        for raw in ("-0.1", "2.5", "warm", "nan"):
            with self.assertRaises(UserInputError):
                settings.with_temperature(raw)

    def test_token_limit_bounds(self):
        settings = Settings()
        self.assertEqual(settings.with_token_limit("2000").token_limit, 2000)
        for raw in ("0", "-5", "1.5", "lots", "100000"):
            with self.assertRaises(UserInputError):
                settings.with_token_limit(raw)

    def test_search_engine_from_legacy_index(self):
        self.assertIs(SearchEngine.from_value(0), SearchEngine.GOOGLE)
        self.assertIs(SearchEngine.from_value(1), SearchEngine.BING)
        self.assertIs(SearchEngine.from_value("duckduckgo"), SearchEngine.DUCKDUCKGO)
        with self.assertRaises(ValueError):
            SearchEngine.from_value(7)


class TestConfigStore(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "config.json"
        self.store = ConfigStore(self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_writes_defaults(self):
        settings = self.store.load()
        self.assertEqual(settings, Settings())
        data = json.loads(self.path.read_text())
        self.assertEqual(data["server_url"], Settings().endpoint)
        self.assertEqual(data["search_engine"], "duckduckgo")
        self.assertTrue(data["nsfw_mode"])

    def test_save_load_round_trip(self):
        settings = Settings(
            endpoint="http://localhost:8080/v1/chat/completions",
            token_limit=512,
            temperature=1.1,
            debug=True,
            search_engine=SearchEngine.BING,
            content_filter=False,
        )
        self.store.save(settings)
        self.assertEqual(self.store.load(), settings)

    def test_legacy_integer_search_engine(self):
        self.path.write_text(json.dumps({"server_url": "http://x/v1/chat/completions", "search_engine": 0}))
        settings = self.store.load()
        self.assertIs(settings.search_engine, SearchEngine.GOOGLE)
        self.assertEqual(settings.endpoint, "http://x/v1/chat/completions")
        self.assertEqual(settings.token_limit, 1000)

    def test_malformed_file_uses_defaults_and_is_left_alone(self):
        self.path.write_text("{broken")
        self.assertEqual(self.store.load(), Settings())
        self.assertEqual(self.path.read_text(), "{broken")

    def test_invalid_value_uses_defaults(self):
        self.path.write_text(json.dumps({"max_tokens": "many"}))
        self.assertEqual(self.store.load(), Settings())


if __name__ == "__main__":
    unittest.main()
