"""TUI components for pine"""

from collections.abc import Callable

from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from rich.columns import Columns
from rich.text import Text

from .completion import AutoCompleter, CommonPrefix, CompletionResult, ShowAll, SingleMatch
from .events import SessionEvent


def format_tool_args(input_dict: dict, max_len: int = 100) -> str:
    """Format tool arguments for display, truncating long values."""
    args_display = []
    for key, value in input_dict.items():
        value_str = str(value)
        if len(value_str) > max_len:
            value_str = value_str[:max_len] + "..."
        args_display.append(f"{key}={value_str}")
    return ", ".join(args_display)


def format_event(event: SessionEvent) -> Text:
    """One-line description of a session event"""
    if event.kind == "directory_change":
        return Text.assemble(("✓ ", "green"), "Changed directory to: ", (event.to_directory, "bold cyan"))
    return Text(str(event))


def format_candidates(candidates: list[str]) -> Columns:
    """Lay completion candidates out in columns, like a shell listing"""
    return Columns([Text(candidate, style="cyan") for candidate in candidates], padding=(0, 2))


class InputController:
    """Connects an input buffer to its own AutoCompleter

    Tab presses go through :meth:`handle_tab`. Any other edit must reach
    :meth:`on_text_changed` so a stale Tab count is never reused; edits made
    by the controller itself are recognised and keep the state.
    """

    def __init__(self, current_directory: Callable[[], str], completer: AutoCompleter | None = None):
        self.current_directory = current_directory
        self.completer = completer or AutoCompleter()
        self._applying_completion = False

    def on_text_changed(self, text: str):
        """Called on every buffer change"""
        if not self._applying_completion:
            self.completer.reset()

    def on_tab(self, text: str) -> CompletionResult:
        """Run one completion step for ``text``"""
        return self.completer.complete(text, self.current_directory())

    def handle_tab(self, buffer: Buffer, show_candidates: Callable[[list[str]], None]) -> CompletionResult:
        """Complete the buffer in place or disclose the candidates"""
        result = self.on_tab(buffer.text)

        if isinstance(result, (SingleMatch, CommonPrefix)):
            self.replace_text(buffer, result.text)
        elif isinstance(result, ShowAll):
            show_candidates(result.candidates)

        return result

    def replace_text(self, buffer: Buffer, text: str):
        """Set buffer text without resetting completion state"""
        if buffer.text == text:
            return
        self._applying_completion = True
        try:
            buffer.document = Document(text, cursor_position=len(text))
        finally:
            self._applying_completion = False
