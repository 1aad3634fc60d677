"""TUI-enhanced interactive mode for pine"""

import os
from typing import Any

from anthropic import APIError
from prompt_toolkit import PromptSession
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.history import FileHistory
from prompt_toolkit.key_binding import KeyBindings
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from .agent import PineAgent
from .commands import COMMANDS, get_command_suggestion, is_valid_interactive_command, parse_command
from .config import PineConfig, get_config_dir
from .session import Session, SessionStore
from .tui import InputController, format_candidates, format_event, format_tool_args


def _short_directory(path: str) -> str:
    home = os.path.expanduser("~")
    if path == home or path.startswith(home + "/"):
        return "~" + path[len(home) :]
    return path


async def handle_cd_command(
    session: Session, argument: str, config: PineConfig, store: SessionStore, console: Console
) -> bool:
    """Handle /cd <path>; returns True if the directory changed"""
    outcome = session.change_directory(argument, config.working_directory)
    if not outcome.accepted:
        console.print(f"[red]cd declined:[/red] {outcome.reason}\n")
        return False

    store.save(session)
    if outcome.event is not None:
        console.print(format_event(outcome.event))
    console.print()
    return True


async def handle_pwd_command(session: Session, config: PineConfig, console: Console):
    """Handle /pwd command"""
    console.print(f"[cyan]{session.current_directory(config.working_directory)}[/cyan]\n")


async def handle_help_command(console: Console):
    """Handle /help command"""
    commands = "\n".join(f"- `{cmd}` - {description}" for cmd, description in COMMANDS.items())
    help_text = f"""
# pine Interactive Mode Help

## Commands
{commands}

## Working Directory
- `/cd <path>` changes the directory shell commands run in
- Paths may be absolute, relative to the current directory, or start with `~/`
- The change is recorded in the session and restored when you resume it

## Keyboard Shortcuts
- `Enter` - Submit your input
- `Tab` - Complete commands and `/cd` directories
- `Tab Tab` - List all matches when there is more than one
- `Up/Down` - Navigate command history
- `Ctrl-D` - Exit
"""
    console.print(Markdown(help_text))
    console.print()


async def tui_interactive_mode(agent: PineAgent, store: SessionStore, session: Session, config: PineConfig):
    """Run the interactive chat loop for one session"""
    console = Console()

    history_file = get_config_dir() / "interactive_history.txt"
    history_file.parent.mkdir(parents=True, exist_ok=True)

    controller = InputController(lambda: session.current_directory(config.working_directory))

    kb = KeyBindings()

    @kb.add("tab")
    def _(event):
        def show(candidates: list[str]):
            run_in_terminal(lambda: console.print(format_candidates(candidates)))

        controller.handle_tab(event.current_buffer, show)

    prompt_session: Any = PromptSession(
        message=lambda: f"{_short_directory(session.current_directory(config.working_directory))}> ",
        multiline=False,
        history=FileHistory(str(history_file)),
        key_bindings=kb,
    )
    prompt_session.default_buffer.on_text_changed += lambda buffer: controller.on_text_changed(buffer.text)

    console.print(
        Panel.fit(
            f"[bold cyan]pine - {session.display_title}[/bold cyan]\n\n"
            f"Working directory: [cyan]{session.current_directory(config.working_directory)}[/cyan]\n"
            "Commands: [yellow]/cd[/yellow], [yellow]/pwd[/yellow], [yellow]/help[/yellow]\n"
            "Type [yellow]/exit[/yellow] or [yellow]/quit[/yellow] to exit\n\n"
            "[dim]Press Enter to submit • Tab for completion[/dim]",
            border_style="cyan",
        )
    )
    if session.transcript or len(session.events):
        console.print(
            f"[dim]Resumed session with {len(session.transcript)} message(s) "
            f"and {len(session.events)} event(s)[/dim]\n"
        )

    def on_tool_call(name: str, tool_input: dict):
        console.print(f"[dim]🔧 {name}({format_tool_args(tool_input)})[/dim]")

    while True:
        try:
            user_input = (await prompt_session.prompt_async()).strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            break

        controller.completer.reset()

        if not user_input:
            continue

        if user_input.startswith("/"):
            if not is_valid_interactive_command(user_input):
                console.print(f"[yellow]{get_command_suggestion(user_input, is_interactive=True)}[/yellow]\n")
                continue

            command, argument = parse_command(user_input)
            if command in ("/exit", "/quit"):
                break
            if command == "/cd":
                await handle_cd_command(session, argument, config, store, console)
            elif command == "/pwd":
                await handle_pwd_command(session, config, console)
            elif command == "/help":
                await handle_help_command(console)
            continue

        try:
            with console.status("[cyan]Thinking...[/cyan]"):
                response = await agent.send_message(session, user_input, on_tool_call=on_tool_call)
        except APIError as e:
            console.print(f"[red]Failed to send message: {e}[/red]\n")
            continue
        finally:
            store.save(session)

        console.print(Markdown(response) if response else "[dim](no response)[/dim]")
        console.print()

    store.save(session)
    console.print("[dim]Goodbye![/dim]")
