"""
todoboard Test Suite — CLI
===========================
Tests for the serve / env / shell commands.

Usage:
    python -m pytest tests/test_cli.py -v
"""
import sys
import os
import io
import json
import unittest
from contextlib import redirect_stdout, redirect_stderr
from unittest import mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from todoboard import cli


def run_cli(argv, inputs=None, environ=None):
    out = io.StringIO()
    with mock.patch.dict(os.environ, environ or {}, clear=True), \
            mock.patch("builtins.input", side_effect=inputs or [EOFError()]), \
            redirect_stdout(out):
        code = cli.main(argv)
    return code, out.getvalue()


class TestShell(unittest.TestCase):

    def test_add_toggle_remove(self):
        code, out = run_cli(["shell"], inputs=[
            "add Buy milk",
            "add Walk dog",
            "toggle 1",
            "rm 2",
            "list",
            "exit",
        ])
        self.assertEqual(code, 0)
        lines = out.strip().splitlines()
        self.assertEqual(lines[-1].split(), ["[x]", "1", "Buy", "milk"])
        self.assertEqual(lines[-2], lines[-1])

    def test_blank_add_shows_empty_message(self):
        _, out = run_cli(["shell"], inputs=["add    ", "exit"])
        self.assertIn("No todos yet! Add some above.", out)

    def test_bad_id_and_unknown_command(self):
        _, out = run_cli(["shell"], inputs=["toggle abc", "frobnicate", EOFError()])
        self.assertIn("Expected a numeric id", out)
        self.assertIn("Unknown command: frobnicate", out)

    def test_help(self):
        _, out = run_cli(["shell"], inputs=["help", "quit"])
        self.assertIn("toggle <id>", out)


class TestEnvCommand(unittest.TestCase):

    def test_json_output(self):
        code, out = run_cli(["env", "--json"], environ={
            "TODOBOARD_PUBLIC_NAME": "demo",
            "TODOBOARD_EXPOSE": "DATABASE_HOST",
            "DATABASE_HOST": "db",
            "SECRET": "hidden",
        })
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["server"], {"TODOBOARD_PUBLIC_NAME": "demo", "DATABASE_HOST": "db"})
        self.assertIn("MY_VAR_FROM_YAML", data["seed"])
        self.assertNotIn("SECRET", out)

    def test_table_output(self):
        _, out = run_cli(["env"])
        self.assertIn("NEW_VAR_FROM_BACKEND", out)
        self.assertIn("(none)", out)


class TestServeCommand(unittest.TestCase):

    @mock.patch("todoboard.server.run_server")
    def test_flags_reach_config(self, mock_run):
        code, _ = run_cli(["serve", "--port", "8123", "--no-browser"])
        self.assertEqual(code, 0)
        config = mock_run.call_args[0][0]
        self.assertEqual(config.port, 8123)
        self.assertEqual(config.env_endpoint, "http://127.0.0.1:8123/api/env")
        self.assertFalse(mock_run.call_args[1]["open_browser"])

    @mock.patch("todoboard.server.run_server")
    def test_explicit_endpoint_kept(self, mock_run):
        run_cli(["serve", "--port", "8123"],
                environ={"TODOBOARD_ENV_ENDPOINT": "http://elsewhere/api/env"})
        config = mock_run.call_args[0][0]
        self.assertEqual(config.env_endpoint, "http://elsewhere/api/env")
        self.assertTrue(mock_run.call_args[1]["open_browser"])


class TestMain(unittest.TestCase):

    def test_config_error_exits_1(self):
        err = io.StringIO()
        with redirect_stderr(err):
            code, _ = run_cli(["env"], environ={"TODOBOARD_PORT": "nope"})
        self.assertEqual(code, 1)
        self.assertIn("Configuration error", err.getvalue())

    def test_no_command_prints_help(self):
        code, out = run_cli([])
        self.assertEqual(code, 0)
        self.assertIn("usage: todoboard", out)


if __name__ == "__main__":
    unittest.main()
