"""Tests for the multi-press tab completion state machine"""

from pine.completion import (
    AutoCompleter,
    CommandCompletion,
    CommonPrefix,
    CompletionStrategy,
    NoMatches,
    ShowAll,
    SingleMatch,
    find_common_prefix,
)


class FixedStrategy(CompletionStrategy):
    """Claims input starting with '!' and offers a fixed candidate list"""

    def __init__(self, candidates):
        self.candidates = candidates
        self.calls = 0

    def can_handle(self, text):
        return text.startswith("!")

    def get_completions(self, text, current_directory):
        self.calls += 1
        return list(self.candidates)

    def build_completion(self, text, suggestion, current_directory, complete=True):
        return f"!{suggestion}{'/' if complete else ''}"


class TestFindCommonPrefix:
    """Tests for find_common_prefix"""

    def test_shared_prefix(self):
        assert find_common_prefix(["foo", "foobar", "foobaz"]) == "foo"

    def test_no_shared_prefix(self):
        assert find_common_prefix(["abc", "xyz"]) is None

    def test_case_sensitive(self):
        """Names that differ only in case share nothing"""
        assert find_common_prefix(["Docs", "docs"]) is None
        assert find_common_prefix(["user", "User"]) is None

    def test_single_and_empty(self):
        assert find_common_prefix(["only"]) == "only"
        assert find_common_prefix([]) is None

    def test_prefix_shrinks_across_candidates(self):
        assert find_common_prefix(["interstellar", "internet", "interval"]) == "inter"
        assert find_common_prefix(["user", "usr"]) == "us"


class TestTabPresses:
    """Tests for the press-count driven results"""

    def test_no_strategy_is_no_matches(self):
        completer = AutoCompleter()
        assert completer.complete("hello", "/") == NoMatches()
        assert completer.last_completion_input == ""
        assert completer.tab_press_count == 0

    def test_empty_candidates_is_no_matches(self):
        completer = AutoCompleter((FixedStrategy([]),))
        assert completer.complete("!x", "/") == NoMatches()
        assert completer.tab_press_count == 0

    def test_single_candidate_completes_on_every_press(self):
        completer = AutoCompleter((FixedStrategy(["only"]),))
        for _ in range(3):
            assert completer.complete("!o", "/") == SingleMatch("!only/")

    def test_common_prefix_then_show_all(self):
        completer = AutoCompleter((FixedStrategy(["foobar", "foobaz"]),))
        assert completer.complete("!f", "/") == CommonPrefix("!fooba")
        assert completer.complete("!f", "/") == ShowAll(["foobar", "foobaz"])
        assert completer.complete("!f", "/") == ShowAll(["foobar", "foobaz"])

    def test_no_common_prefix_shows_all_immediately(self):
        completer = AutoCompleter((FixedStrategy(["abc", "xyz"]),))
        assert completer.complete("!", "/") == ShowAll(["abc", "xyz"])
        assert completer.complete("!", "/") == ShowAll(["abc", "xyz"])

    def test_candidates_cached_for_same_input(self):
        strategy = FixedStrategy(["foobar", "foobaz"])
        completer = AutoCompleter((strategy,))
        completer.complete("!f", "/")
        completer.complete("!f", "/")
        assert strategy.calls == 1
        assert completer.tab_press_count == 2

    def test_changed_input_resets_press_count(self):
        strategy = FixedStrategy(["foobar", "foobaz"])
        completer = AutoCompleter((strategy,))
        completer.complete("!f", "/")
        completer.complete("!f", "/")

        # One more character: fresh candidates, back to the common prefix stage
        assert completer.complete("!fo", "/") == CommonPrefix("!fooba")
        assert completer.tab_press_count == 1
        assert strategy.calls == 2

    def test_reset_clears_state(self):
        strategy = FixedStrategy(["foobar", "foobaz"])
        completer = AutoCompleter((strategy,))
        completer.complete("!f", "/")
        completer.reset()

        assert completer.current_suggestions == []
        assert completer.last_completion_input == ""
        assert completer.tab_press_count == 0

        assert completer.complete("!f", "/") == CommonPrefix("!fooba")
        assert strategy.calls == 2

    def test_first_matching_strategy_wins(self):
        first = FixedStrategy(["first"])
        second = FixedStrategy(["second"])
        completer = AutoCompleter((first, second))
        assert completer.complete("!x", "/") == SingleMatch("!first/")
        assert second.calls == 0

    def test_completers_do_not_share_state(self):
        one = AutoCompleter((FixedStrategy(["foobar", "foobaz"]),))
        two = AutoCompleter((FixedStrategy(["foobar", "foobaz"]),))
        one.complete("!f", "/")
        assert two.tab_press_count == 0
        assert two.complete("!f", "/") == CommonPrefix("!fooba")


class TestDirectoryScenarios:
    """End-to-end completion against a real directory tree"""

    def test_ambiguous_prefix(self, fs_tree):
        completer = AutoCompleter()
        text = f"/cd {fs_tree}/us"
        assert completer.complete(text, "/") == CommonPrefix(f"/cd {fs_tree}/us")
        assert completer.complete(text, "/") == ShowAll(["user", "usr"])

    def test_unique_match_descends(self, fs_tree):
        completer = AutoCompleter()
        assert completer.complete(f"/cd {fs_tree}/usr", "/") == SingleMatch(f"/cd {fs_tree}/usr/")

    def test_completion_continues_after_descending(self, fs_tree):
        completer = AutoCompleter()
        result = completer.complete(f"/cd {fs_tree}/usr", "/")
        assert completer.complete(result.text, "/") == SingleMatch(f"/cd {fs_tree}/usr/local/")

    def test_directory_listing_without_common_prefix(self, fs_tree):
        completer = AutoCompleter()
        assert completer.complete(f"/cd {fs_tree}/", "/") == ShowAll(["opt", "user", "usr"])

    def test_hidden_directories_need_dot(self, fs_tree):
        completer = AutoCompleter()
        assert completer.complete(f"/cd {fs_tree}/.", "/") == CommonPrefix(f"/cd {fs_tree}/.")
        assert completer.complete(f"/cd {fs_tree}/.", "/") == ShowAll([".config", ".hidden"])

    def test_relative_to_current_directory(self, fs_tree):
        completer = AutoCompleter()
        assert completer.complete("/cd o", str(fs_tree)) == SingleMatch(f"/cd {fs_tree}/opt/")

    def test_missing_directory_is_no_matches(self, fs_tree):
        completer = AutoCompleter()
        assert completer.complete(f"/cd {fs_tree}/missing/", "/") == NoMatches()

    def test_case_differences_shorten_common_prefix(self, tmp_path):
        """Case-insensitive matching, case-sensitive common prefix"""
        (tmp_path / "Docs").mkdir()
        (tmp_path / "docs-old").mkdir()
        completer = AutoCompleter()
        text = f"/cd {tmp_path}/d"
        assert completer.complete(text, "/") == ShowAll(["Docs", "docs-old"])


class TestCommandScenarios:
    """Completion of slash command names"""

    def test_unique_command(self):
        completer = AutoCompleter()
        assert completer.complete("/c", "/") == SingleMatch("/cd ")

    def test_full_command_gets_space(self):
        completer = AutoCompleter()
        assert completer.complete("/cd", "/") == SingleMatch("/cd ")

    def test_unknown_command(self):
        completer = AutoCompleter()
        assert completer.complete("/zz", "/") == NoMatches()

    def test_common_prefix_does_not_add_space(self):
        completer = AutoCompleter((CommandCompletion(["/exit", "/export"]),))
        assert completer.complete("/e", "/") == CommonPrefix("/ex")
        assert completer.complete("/e", "/") == ShowAll(["/exit", "/export"])

    def test_all_commands_share_slash(self):
        """A lone '/' is already the common prefix, the second press lists everything"""
        completer = AutoCompleter()
        assert completer.complete("/", "/") == CommonPrefix("/")
        assert completer.complete("/", "/") == ShowAll(["/cd", "/exit", "/help", "/pwd", "/quit"])
