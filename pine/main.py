"""Main entry point for pine"""

import asyncio
import logging
import os
import sys

from .agent import PineAgent
from .commands import get_command_suggestion, is_valid_cli_command
from .config import PineConfig, get_config, get_config_dir
from .session import Session, SessionStore

logger = logging.getLogger(__name__)


def setup_logging():
    """Log to a file in the config dir so the prompt stays clean"""
    level_name = os.getenv("PINE_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        filename=str(get_config_dir() / "pine.log"),
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def print_help():
    """Print CLI usage"""
    print(
        """pine - terminal chat assistant

Usage:
  pine                 Resume the latest session (or start one)
  pine /new [title]    Start a new session
  pine /list           List sessions, newest first
  pine /resume <id>    Resume a session by id
  pine /delete <id>    Delete a session
  pine /help           Show this help

Configuration: ~/.config/pine/config.yaml (override with PINE_CONFIG_DIR)
"""
    )


def print_sessions(store: SessionStore, config: PineConfig):
    """Print one line per stored session"""
    sessions = store.list_sessions()
    if not sessions:
        print("No sessions yet. Run 'pine' to start one.")
        return

    for session in sessions:
        directory = session.current_directory(config.working_directory)
        print(f"{session.id}  {session.display_title:<32}  {len(session.transcript):>4} msgs  {directory}")


def select_session(store: SessionStore, config: PineConfig, command: str | None, args: list[str]) -> Session | None:
    """Pick the session interactive mode should run"""
    if command == "new":
        title = " ".join(args) or None
        return store.create(working_directory=config.working_directory, title=title)

    if command == "resume":
        if not args:
            print("Usage: pine /resume <id>")
            return None
        try:
            return store.load(args[0])
        except FileNotFoundError as e:
            print(f"Error: {e}")
            return None

    return store.latest() or store.create(working_directory=config.working_directory)


async def main_async():
    """Async main function"""
    setup_logging()
    config = get_config()

    command = sys.argv[1] if len(sys.argv) > 1 else None
    args = sys.argv[2:]

    if command and not command.startswith("/"):
        print("Error: Commands must start with /")
        print(f"Did you mean: /{command}?")
        print("\nRun 'pine /help' to see available commands")
        sys.exit(1)

    if command:
        command = command[1:]

    if command and not is_valid_cli_command(command):
        print(get_command_suggestion(f"/{command}", is_interactive=False))
        sys.exit(1)

    if command == "help":
        print_help()
        return

    store = SessionStore()

    if command == "list":
        print_sessions(store, config)
        return

    if command == "delete":
        if not args:
            print("Usage: pine /delete <id>")
            sys.exit(1)
        if store.delete(args[0]):
            print(f"Deleted session {args[0]}")
        else:
            print(f"No session with id '{args[0]}'")
            sys.exit(1)
        return

    if not config.anthropic_api_key:
        print("ERROR: No Anthropic API key configured")
        print("Set ANTHROPIC_API_KEY in your environment or in a .env file,")
        print("or add anthropic_api_key to ~/.config/pine/config.yaml")
        sys.exit(1)

    session = select_session(store, config, command, args)
    if session is None:
        sys.exit(1)

    from .tui_interactive import tui_interactive_mode

    agent = PineAgent(config)
    logger.info("Starting interactive mode for session %s", session.id)
    await tui_interactive_mode(agent, store, session, config)


def main():
    """Main entry point"""
    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
