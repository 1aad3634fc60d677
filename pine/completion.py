"""Tab completion for the pine input field

Completion is driven by repeated Tab presses on the same input, the way a
shell does it:

- one candidate: complete it straight away
- several candidates, first press: complete up to their common prefix
- several candidates, next press (or no common prefix): show them all

What counts as a candidate depends on the input. Each kind of input is
claimed by a :class:`CompletionStrategy`; the :class:`AutoCompleter` asks
them in a fixed priority order.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .candidates import list_directories
from .commands import COMMANDS, PATH_COMMANDS
from .paths import expand_path, join_candidate, split_path

logger = logging.getLogger(__name__)


class CompletionStrategy(ABC):
    """A handler for one class of completable input"""

    @abstractmethod
    def can_handle(self, text: str) -> bool:
        """Whether this strategy owns ``text``"""

    @abstractmethod
    def get_completions(self, text: str, current_directory: str) -> list[str]:
        """Candidate names for ``text``, in display order"""

    @abstractmethod
    def build_completion(self, text: str, suggestion: str, current_directory: str, complete: bool = True) -> str:
        """Build the replacement input text

        Args:
            text: Input the candidates were computed for
            suggestion: A candidate, or the candidates' common prefix
            current_directory: Working directory relative paths resolve against
            complete: True when ``suggestion`` is a whole candidate; False when
                it is only a common prefix the user will keep typing after
        """


class DirectoryCompletion(CompletionStrategy):
    """Complete the directory argument of a path command such as ``/cd``"""

    def __init__(self, command: str = "/cd"):
        self.command = command
        self.prefix = f"{command} "

    def can_handle(self, text: str) -> bool:
        return text.startswith(self.prefix)

    def _target(self, text: str, current_directory: str) -> tuple[str, str]:
        fragment = text[len(self.prefix) :]
        return split_path(expand_path(fragment, current_directory))

    def get_completions(self, text: str, current_directory: str) -> list[str]:
        if not self.can_handle(text):
            return []
        directory, prefix = self._target(text, current_directory)
        return list_directories(directory, prefix)

    def build_completion(self, text: str, suggestion: str, current_directory: str, complete: bool = True) -> str:
        if not self.can_handle(text):
            return text
        directory, _ = self._target(text, current_directory)
        path = join_candidate(directory, suggestion)
        if complete and not path.endswith("/"):
            # Ready to descend and keep completing
            path += "/"
        return f"{self.prefix}{path}"

    def __repr__(self) -> str:
        return f"DirectoryCompletion(command={self.command!r})"


class CommandCompletion(CompletionStrategy):
    """Complete slash command names"""

    def __init__(self, commands: list[str] | None = None):
        self.commands = list(commands) if commands is not None else list(COMMANDS)

    def can_handle(self, text: str) -> bool:
        # A space means the command name is finished
        return text.startswith("/") and " " not in text

    def get_completions(self, text: str, current_directory: str) -> list[str]:
        if not text.startswith("/"):
            return []
        prefix = text[1:].lower()
        return sorted(cmd for cmd in self.commands if cmd[1:].lower().startswith(prefix))

    def build_completion(self, text: str, suggestion: str, current_directory: str, complete: bool = True) -> str:
        return f"{suggestion} " if complete else suggestion

    def __repr__(self) -> str:
        return f"CommandCompletion(commands={self.commands!r})"


def default_strategies() -> tuple[CompletionStrategy, ...]:
    """Strategies in priority order

    Path commands come first: ``/cd `` with its space must never be read as
    an unfinished command name.
    """
    return tuple(DirectoryCompletion(cmd) for cmd in PATH_COMMANDS) + (CommandCompletion(),)


@dataclass(frozen=True)
class NoMatches:
    """Nothing to complete"""


@dataclass(frozen=True)
class SingleMatch:
    """Exactly one candidate; ``text`` is the completed input"""

    text: str


@dataclass(frozen=True)
class CommonPrefix:
    """Several candidates narrowed to their shared prefix"""

    text: str


@dataclass(frozen=True)
class ShowAll:
    """Several candidates for the user to pick from"""

    candidates: list[str] = field(default_factory=list)


CompletionResult = NoMatches | SingleMatch | CommonPrefix | ShowAll


def find_common_prefix(candidates: list[str]) -> str | None:
    """Longest case-sensitive prefix shared by all candidates

    Returns None when the candidates share nothing. Candidates differing
    only in case (``Docs``, ``docs``) therefore share nothing, the same as
    in a shell.
    """
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    prefix = candidates[0]
    for candidate in candidates[1:]:
        while prefix and not candidate.startswith(prefix):
            prefix = prefix[:-1]
        if not prefix:
            return None

    return prefix or None


class AutoCompleter:
    """Tab completion state machine for one input field

    Holds the candidates computed for the last completed input and how many
    times Tab has been pressed on it. Each input field owns its own instance.
    """

    def __init__(self, strategies: tuple[CompletionStrategy, ...] | None = None):
        self.strategies = strategies if strategies is not None else default_strategies()
        self.current_suggestions: list[str] = []
        self.last_completion_input = ""
        self.tab_press_count = 0

    def strategy_for(self, text: str) -> CompletionStrategy | None:
        """First strategy in priority order that claims ``text``"""
        for strategy in self.strategies:
            if strategy.can_handle(text):
                return strategy
        return None

    def complete(self, text: str, current_directory: str) -> CompletionResult:
        """Handle one Tab press on ``text``

        Args:
            text: Current content of the input field
            current_directory: Working directory for relative paths

        Returns:
            One of NoMatches, SingleMatch, CommonPrefix or ShowAll
        """
        strategy = self.strategy_for(text)
        if strategy is None:
            return NoMatches()

        if text != self.last_completion_input:
            self.current_suggestions = strategy.get_completions(text, current_directory)
            self.last_completion_input = text
            self.tab_press_count = 0
            logger.debug("Completions for %r via %r: %s", text, strategy, self.current_suggestions)

        if not self.current_suggestions:
            return NoMatches()

        self.tab_press_count += 1

        if len(self.current_suggestions) == 1:
            return SingleMatch(strategy.build_completion(text, self.current_suggestions[0], current_directory))

        if self.tab_press_count == 1:
            prefix = find_common_prefix(self.current_suggestions)
            if prefix is not None:
                return CommonPrefix(strategy.build_completion(text, prefix, current_directory, complete=False))

        return ShowAll(list(self.current_suggestions))

    def reset(self):
        """Forget completion state (call when the text changes other than by Tab)"""
        self.current_suggestions = []
        self.last_completion_input = ""
        self.tab_press_count = 0
