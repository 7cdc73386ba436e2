import os
import tempfile
import unittest

from backend.app.core.bracket_config import BracketConfig, DEFAULT_CONFIG_PATH, load_config


class TestBracketConfig(unittest.TestCase):
    def test_bundled_config_matches_defaults(self):
        self.assertTrue(DEFAULT_CONFIG_PATH.exists())
        config = load_config(str(DEFAULT_CONFIG_PATH))
        self.assertEqual(config.scoring.win_points, 3)
        self.assertEqual(config.scoring.draw_points, 1)
        self.assertIsNone(config.shuffle_seed)

    def test_loads_yaml_overrides(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "brackets.yaml")
            with open(path, "w") as f:
                f.write("scoring:\n  win_points: 2\nshuffle_seed: 11\n")

            config = load_config(path)

        self.assertEqual(config.scoring.win_points, 2)
        self.assertEqual(config.scoring.draw_points, 1)
        self.assertEqual(config.shuffle_seed, 11)

    def test_missing_file_falls_back_to_defaults(self):
        config = load_config("/nonexistent/brackets.yaml")
        self.assertEqual(config, BracketConfig())


if __name__ == '__main__':
    unittest.main()
