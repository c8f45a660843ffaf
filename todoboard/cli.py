"""
todoboard CLI — Command-Line Interface
=======================================
Entry point for running and poking at todoboard.

Usage:
    # Launch the web server
    todoboard serve --port 3000

    # Show what the environment page would display
    todoboard env
    todoboard env --json

    # Terminal to-do list (same rules as the web page)
    todoboard shell
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from todoboard.config import AppConfig, ConfigError
from todoboard.todos import EMPTY_MESSAGE, TodoListView

SHELL_HELP = """
Commands:
  add <text>     Add a todo
  toggle <id>    Flip a todo between open and done
  rm <id>        Delete a todo
  list           Show the list
  help           Show this help
  exit           Quit (the list is discarded)
"""


# ─────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────

def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def print_todos(view: TodoListView):
    if view.is_empty:
        print(f"  {EMPTY_MESSAGE}")
        return
    for item in view.items:
        mark = "x" if item.completed else " "
        print(f"  [{mark}] {item.id:>3}  {item.text}")


def _parse_id(arg: str):
    try:
        return int(arg)
    except ValueError:
        return None


# ─────────────────────────────────────────────────────────────
#  Commands
# ─────────────────────────────────────────────────────────────

def cmd_serve(args, config: AppConfig):
    """Launch the web server."""
    from todoboard.server import run_server

    default_endpoint = f"http://{config.host}:{config.port}/api/env"
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    # An explicit TODOBOARD_ENV_ENDPOINT wins over the bind address
    if config.env_endpoint == default_endpoint:
        config.env_endpoint = f"http://{config.host}:{config.port}/api/env"
    run_server(config, open_browser=not args.no_browser)


def cmd_env(args, config: AppConfig):
    """Show seed entries and the server environment."""
    seed = config.seed_entries()
    server_env = config.server_environment()

    if args.json:
        print(json.dumps({"seed": seed, "server": server_env}, indent=2, sort_keys=True))
        return

    print(f"\n─── Seed entries (prefix {config.public_prefix}) ───")
    for key, value in sorted(seed.items()):
        print(f"  {key} = {value}")

    print(f"\n─── Served by /api/env ───")
    if not server_env:
        print("  (none)")
    for key, value in sorted(server_env.items()):
        print(f"  {key} = {value}")


def cmd_shell(args, config: AppConfig):
    """Interactive to-do list in the terminal."""
    view = TodoListView()
    print("─── todoboard shell ─── (type 'help')")

    while True:
        try:
            line = input("todo> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        command, _, rest = line.strip().partition(" ")
        command = command.lower()

        if not command:
            continue
        if command in ("exit", "quit"):
            break
        if command == "help":
            print(SHELL_HELP)
        elif command == "list":
            print_todos(view)
        elif command == "add":
            view.add(rest)
            print_todos(view)
        elif command in ("toggle", "rm"):
            todo_id = _parse_id(rest.strip())
            if todo_id is None:
                print(f"  ✘ Expected a numeric id, got {rest.strip()!r}")
                continue
            if command == "toggle":
                view.toggle(todo_id)
            else:
                view.remove(todo_id)
            print_todos(view)
        else:
            print(f"  ✘ Unknown command: {command}")

    view.unmount()


# ─────────────────────────────────────────────────────────────
#  Main
# ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todoboard",
        description="todoboard — todo list and environment inspector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  todoboard serve --port 3000\n"
            "  todoboard env --json\n"
            "  todoboard shell\n"
        ),
    )
    parser.add_argument("--log-level", default=None,
                        help="Logging level (default: TODOBOARD_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # serve
    p_serve = subparsers.add_parser("serve", help="Launch the web server")
    p_serve.add_argument("--host", default=None, help="Bind address")
    p_serve.add_argument("--port", default=None, type=int, help="Port number")
    p_serve.add_argument("--no-browser", action="store_true", help="Don't auto-open browser")

    # env
    p_env = subparsers.add_parser("env", help="Show environment entries")
    p_env.add_argument("--json", action="store_true", help="Print as JSON")

    # shell
    subparsers.add_parser("shell", help="Interactive terminal todo list")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = AppConfig.from_environ()
    except ConfigError as e:
        print(f"✘ Configuration error: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config.log_level = args.log_level.upper()
    setup_logging(config.log_level)

    commands = {
        "serve": cmd_serve,
        "env": cmd_env,
        "shell": cmd_shell,
    }

    if args.command in commands:
        commands[args.command](args, config)
        return 0
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
