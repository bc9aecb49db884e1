import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from sculptor.config import (
    CONFIG_DIR,
    SynthesisConfig,
    load_neo4j_settings,
    load_synthesis_config,
)


class SynthesisConfigTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        dotenv = patch("sculptor.config.load_dotenv")
        dotenv.start()
        self.addCleanup(dotenv.stop)
        env = patch.dict(os.environ, {}, clear=True)
        env.start()
        self.addCleanup(env.stop)

    def write(self, text):
        path = Path(self.tmp.name) / "synthesis.yaml"
        path.write_text(text)
        return path

    def test_shipped_config_matches_defaults(self):
        self.assertEqual(load_synthesis_config(CONFIG_DIR / "synthesis.yaml"), SynthesisConfig())

    def test_missing_file_uses_defaults(self):
        config = load_synthesis_config(Path(self.tmp.name) / "absent.yaml")
        self.assertEqual(config.weekly_sets_for("full_body_3"), 18)
        self.assertEqual(config.priority_ratio, 0.80)

    def test_partial_file_merges_with_defaults(self):
        config = load_synthesis_config(self.write("weekly_sets:\n  full_body_3: 21\nmax_session_minutes: 75\n"))
        self.assertEqual(config.weekly_sets_for("full_body_3"), 21)
        self.assertEqual(config.weekly_sets_for("upper_lower_4"), 24)
        self.assertEqual(config.max_session_minutes, 75)

    def test_environment_overrides_ratio(self):
        path = self.write("priority_ratio: 0.8\n")
        with patch.dict(os.environ, {"SCULPTOR_PRIORITY_RATIO": "0.7"}):
            self.assertEqual(load_synthesis_config(path).priority_ratio, 0.7)

    def test_invalid_ratio_raises(self):
        with self.assertRaises(ValueError):
            load_synthesis_config(self.write("priority_ratio: 1.5\n"))

    def test_unknown_frequency_raises(self):
        with self.assertRaises(KeyError):
            SynthesisConfig().weekly_sets_for("bro_split_5")


class Neo4jSettingsTests(unittest.TestCase):
    def test_environment_wins_over_yaml(self):
        env = {"NEO4J_URI": "bolt://db:7687", "NEO4J_PASSWORD": "secret"}
        with patch("sculptor.config.load_dotenv"), patch.dict(os.environ, env, clear=True):
            settings = load_neo4j_settings()

        self.assertEqual(settings["uri"], "bolt://db:7687")
        self.assertEqual(settings["password"], "secret")
        self.assertEqual(settings["database"], "sculptor")


if __name__ == "__main__":
    unittest.main()
