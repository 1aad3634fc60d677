"""Shell tool: run a bash command in the session's working directory"""

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BASH = "/bin/bash"

# Limit output returned to the model
MAX_OUTPUT_CHARS = 20000

BASH_SHELL_TOOL = {
    "name": "bashShell",
    "description": (
        "Execute a bash command in a new shell. The command runs in the "
        "session's current working directory."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "command": {
                "type": "string",
                "description": "Bash command to run. For example, `ls` or `pwd`",
            },
            "arguments": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Arguments to the command",
            },
        },
        "required": ["command"],
    },
}


@dataclass(frozen=True)
class ShellResult:
    """Exit code and captured output of one command"""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def is_error(self) -> bool:
        return self.exit_code != 0

    def to_text(self) -> str:
        """Render for a tool result"""
        return f"exit code: {self.exit_code}\nstdout:\n{_truncate(self.stdout)}\nstderr:\n{_truncate(self.stderr)}"


def _truncate(text: str) -> str:
    if len(text) > MAX_OUTPUT_CHARS:
        return text[:MAX_OUTPUT_CHARS] + f"\n... [output truncated at {MAX_OUTPUT_CHARS} chars]"
    return text


class BashShell:
    """Run commands with ``bash -c``"""

    def __init__(self, timeout: int = 60):
        self.timeout = timeout

    def run(self, command: str, working_directory: str, arguments: list[str] | None = None) -> ShellResult:
        """Run ``command`` in ``working_directory``

        Extra ``arguments`` become the positional parameters of the script
        (``$0``, ``$1``, ...) as with ``bash -c``.

        Returns:
            ShellResult; a timeout or unusable directory is reported as exit
            code -1 with the reason in stderr rather than raised
        """
        cmd = [BASH, "-c", command] + list(arguments or [])
        logger.info("Running %r in %s", command, working_directory)

        try:
            completed = subprocess.run(
                cmd,
                cwd=working_directory,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Command %r timed out after %ss", command, self.timeout)
            return ShellResult(-1, "", f"Error: Command timed out after {self.timeout} seconds")
        except (FileNotFoundError, NotADirectoryError, PermissionError) as e:
            logger.warning("Cannot run %r in %s: %s", command, working_directory, e)
            return ShellResult(-1, "", f"Error: {e}")

        return ShellResult(completed.returncode, completed.stdout, completed.stderr)
