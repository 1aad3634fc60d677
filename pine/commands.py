"""Slash command registry and validation for pine"""

# Ordered: completion and /help list commands in this order
COMMANDS = {
    "/cd": "Change the working directory",
    "/pwd": "Show the working directory",
    "/help": "Show help message",
    "/exit": "Exit interactive mode",
    "/quit": "Exit interactive mode",
}

# Commands whose argument is a directory path (completed from the filesystem)
PATH_COMMANDS = ("/cd",)

# Valid commands at CLI level
CLI_COMMANDS = [
    "/new",
    "/list",
    "/resume",
    "/delete",
    "/help",
]


def parse_command(user_input: str) -> tuple[str, str]:
    """Split slash-command input into (lowercased command, argument)

    The argument keeps its inner whitespace; only the separating space and
    surrounding whitespace are removed.
    """
    stripped = user_input.strip()
    if " " not in stripped:
        return stripped.lower(), ""
    command, argument = stripped.split(" ", 1)
    return command.lower(), argument.strip()


def is_valid_interactive_command(user_input: str) -> bool:
    """Check if user input is a valid interactive command

    Args:
        user_input: User's input string

    Returns:
        True if it's a valid command or not a command at all
        False if it starts with / but is not a valid command
    """
    if not user_input.startswith("/"):
        # Not a command, goes to the model
        return True

    command, _ = parse_command(user_input)
    return command in COMMANDS


def is_valid_cli_command(command: str) -> bool:
    """Check if a CLI command (without leading /) is valid"""
    return f"/{command}" in CLI_COMMANDS


def get_command_suggestion(user_input: str, is_interactive: bool = False) -> str:
    """Get a helpful error message for invalid commands

    Args:
        user_input: User's invalid input
        is_interactive: Whether in interactive mode

    Returns:
        Error message string
    """
    msg = f"Unknown command '{user_input}'\n\n"

    if is_interactive:
        msg += "Available commands:\n"
        for cmd, description in COMMANDS.items():
            msg += f"  {cmd:<8} {description}\n"
        msg += "\nOr type a message without the / prefix to talk to the assistant."
    else:
        msg += "Run 'pine /help' to see available commands"

    return msg
