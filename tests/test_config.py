"""
todoboard Test Suite — Configuration
=====================================
Tests for AppConfig loading and the seed / server environment maps.

Usage:
    python -m pytest tests/test_config.py -v
"""
import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from todoboard.config import (
    AppConfig, ConfigError, PLACEHOLDER_ENTRIES, public_subset,
)


class TestFromEnviron(unittest.TestCase):

    def test_defaults(self):
        config = AppConfig.from_environ({})
        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.port, 3000)
        self.assertEqual(config.env_endpoint, "http://127.0.0.1:3000/api/env")
        self.assertEqual(config.fetch_timeout, 5.0)
        self.assertEqual(config.log_level, "WARNING")
        self.assertEqual(config.public_vars, {})
        self.assertEqual(config.server_vars, {})

    def test_overrides(self):
        config = AppConfig.from_environ({
            "TODOBOARD_HOST": "0.0.0.0",
            "TODOBOARD_PORT": "8080",
            "TODOBOARD_FETCH_TIMEOUT": "1.5",
            "TODOBOARD_MAX_SESSIONS": "4",
            "TODOBOARD_LOG_LEVEL": "debug",
        })
        self.assertEqual(config.port, 8080)
        self.assertEqual(config.env_endpoint, "http://0.0.0.0:8080/api/env")
        self.assertEqual(config.fetch_timeout, 1.5)
        self.assertEqual(config.max_sessions, 4)
        self.assertEqual(config.log_level, "DEBUG")

    def test_explicit_endpoint(self):
        config = AppConfig.from_environ({"TODOBOARD_ENV_ENDPOINT": "http://other/api/env"})
        self.assertEqual(config.env_endpoint, "http://other/api/env")

    def test_public_prefix_whitelist(self):
        config = AppConfig.from_environ({
            "TODOBOARD_PUBLIC_GREETING": "hi",
            "SECRET_TOKEN": "nope",
        })
        self.assertEqual(config.public_vars, {"TODOBOARD_PUBLIC_GREETING": "hi"})

    def test_custom_prefix(self):
        config = AppConfig.from_environ({
            "TODOBOARD_PUBLIC_PREFIX": "NEXT_PUBLIC_",
            "NEXT_PUBLIC_API": "https://api",
            "TODOBOARD_PUBLIC_OLD": "x",
        })
        self.assertEqual(config.public_vars, {"NEXT_PUBLIC_API": "https://api"})

    def test_exposed_server_vars(self):
        config = AppConfig.from_environ({
            "TODOBOARD_EXPOSE": "DATABASE_HOST, MISSING ,,",
            "DATABASE_HOST": "db.internal",
            "SECRET_TOKEN": "nope",
        })
        self.assertEqual(config.server_vars, {"DATABASE_HOST": "db.internal"})

    def test_bad_numbers(self):
        with self.assertRaises(ConfigError):
            AppConfig.from_environ({"TODOBOARD_PORT": "eighty"})
        with self.assertRaises(ConfigError):
            AppConfig.from_environ({"TODOBOARD_FETCH_TIMEOUT": "soon"})
        with self.assertRaises(ConfigError):
            AppConfig.from_environ({"TODOBOARD_MAX_SESSIONS": "0"})

    def test_config_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigError, ValueError))


class TestEnvironmentMaps(unittest.TestCase):

    def test_seed_has_public_and_placeholders(self):
        config = AppConfig(public_vars={"TODOBOARD_PUBLIC_A": "1"})
        seed = config.seed_entries()
        self.assertEqual(seed["TODOBOARD_PUBLIC_A"], "1")
        for key, value in PLACEHOLDER_ENTRIES.items():
            self.assertEqual(seed[key], value)

    def test_placeholders_win_on_collision(self):
        config = AppConfig(public_vars={"MY_VAR_FROM_YAML": "real"})
        self.assertEqual(config.seed_entries()["MY_VAR_FROM_YAML"], PLACEHOLDER_ENTRIES["MY_VAR_FROM_YAML"])

    def test_server_environment(self):
        config = AppConfig(
            public_vars={"TODOBOARD_PUBLIC_A": "1"},
            server_vars={"DATABASE_HOST": "db"},
        )
        self.assertEqual(
            config.server_environment(),
            {"TODOBOARD_PUBLIC_A": "1", "DATABASE_HOST": "db"},
        )
        self.assertNotIn("MY_VAR_FROM_YAML", config.server_environment())

    def test_public_subset_empty_prefix(self):
        self.assertEqual(public_subset({"A": "1"}, ""), {})


if __name__ == "__main__":
    unittest.main()
