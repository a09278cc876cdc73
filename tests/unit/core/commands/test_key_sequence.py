"""
Tests for the modal key-sequence matcher and the per-stream key buffer.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from mindcmd.constants import DEFAULT_KEY_PATTERNS
from mindcmd.core.commands.key_sequence import (
    KeyPatternTable,
    KeySequenceBuffer,
    KeySequenceMatcher,
)
from mindcmd.core.common.exceptions import KeySequenceError


@pytest.fixture
def matcher() -> KeySequenceMatcher:
    return KeySequenceMatcher()


class TestKeyPatternTable:
    def test_default_table(self) -> None:
        table = KeyPatternTable.default()
        assert "zz" in table
        assert table.lookup("dd") == "dd"
        assert table.is_prefix("z")
        assert not table.is_prefix("zz")
        assert len(table) == len(DEFAULT_KEY_PATTERNS)

    @pytest.mark.parametrize("patterns", [{"": "x"}, {"2x": "x"}, {"q": ""}])
    def test_invalid_patterns_rejected(self, patterns) -> None:
        with pytest.raises(KeySequenceError):
            KeyPatternTable(patterns)

    def test_zero_may_start_a_pattern(self) -> None:
        table = KeyPatternTable({"0": "line-start"})
        assert table.lookup("0") == "line-start"


class TestMatch:
    def test_single_key(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("j")
        assert result.is_complete and result.command == "j" and result.count is None

    def test_chord(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("zz")
        assert result.is_complete and result.command == "zz"

    def test_chord_prefix_is_partial(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("z")
        assert result.is_partial and not result.is_complete
        assert not result.should_clear

    def test_count_only_is_partial_with_count(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("12")
        assert result.is_partial
        assert result.count == 12

    def test_count_with_command(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("3j")
        assert result.is_complete
        assert result.command == "j"
        assert result.count == 3

    def test_count_with_chord_prefix(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("3d")
        assert result.is_partial and result.count == 3

    def test_numbered_list(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("5m")
        assert result.is_complete
        assert result.command == "m:5"
        assert result.count == 5

    def test_plain_m_is_regular_command(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("m")
        assert result.is_complete and result.command == "m"

    def test_dot_repeat(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match(".")
        assert result.is_complete and result.is_dot_repeat
        assert result.command == "."
        assert result.count is None

    def test_dot_repeat_with_count(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("4.")
        assert result.is_dot_repeat and result.count == 4

    def test_zero_is_a_command_not_a_count(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("0")
        assert result.is_complete and result.command == "0" and result.count is None

    def test_count_containing_zero(self, matcher: KeySequenceMatcher) -> None:
        result = matcher.match("10j")
        assert result.count == 10 and result.command == "j"

    @pytest.mark.parametrize("sequence", ["q", "zq", "3q", "ddd"])
    def test_invalid_sequences_clear(self, matcher: KeySequenceMatcher, sequence: str) -> None:
        result = matcher.match(sequence)
        assert result.should_clear
        assert result.is_invalid
        assert result.command is None

    def test_surrounding_whitespace_ignored(self, matcher: KeySequenceMatcher) -> None:
        assert matcher.match(" dd ").command == "dd"

    def test_custom_numbered_key(self) -> None:
        matcher = KeySequenceMatcher(
            KeyPatternTable({"n": "n"}), numbered_key="#"
        )
        assert matcher.match("2#").command == "#:2"
        assert matcher.match("2m").should_clear

    def test_is_valid_key_and_known_keys(self, matcher: KeySequenceMatcher) -> None:
        assert matcher.is_valid_key("z")
        assert not matcher.is_valid_key("q")
        known = matcher.known_keys()
        assert "escape" in known and "5" in known

    def test_can_continue(self, matcher: KeySequenceMatcher) -> None:
        assert matcher.can_continue("z", "z")
        assert matcher.can_continue("", "3")
        assert not matcher.can_continue("z", "q")

    # "0" after a count reads as another count digit
    @given(
        st.sampled_from(sorted(k for k in DEFAULT_KEY_PATTERNS if k != "0")),
        st.integers(min_value=1, max_value=999),
    )
    def test_every_pattern_matches_with_any_count(self, sequence: str, count: int) -> None:
        result = KeySequenceMatcher().match(f"{count}{sequence}")
        assert result.is_complete
        assert result.count == count

    @given(st.text(max_size=6))
    def test_exactly_one_state(self, sequence: str) -> None:
        result = KeySequenceMatcher().match(sequence)
        assert not (result.is_complete and result.is_partial)
        assert result.should_clear == (not result.is_complete and not result.is_partial)


class TestKeySequenceBuffer:
    def test_accumulates_until_complete(self) -> None:
        buffer = KeySequenceBuffer()

        assert buffer.feed("2").is_partial
        assert buffer.feed("d").is_partial
        assert buffer.pending == "2d"

        result = buffer.feed("d")
        assert result.is_complete and result.command == "dd" and result.count == 2
        assert buffer.pending == ""

    def test_invalid_key_clears(self) -> None:
        buffer = KeySequenceBuffer()
        buffer.feed("z")

        result = buffer.feed("q")

        assert result.should_clear
        assert buffer.pending == ""

    def test_escape_clears(self) -> None:
        buffer = KeySequenceBuffer()
        buffer.feed("3")
        buffer.feed("g")

        result = buffer.feed("Escape")

        assert result.should_clear
        assert buffer.pending == ""

    def test_reset(self) -> None:
        buffer = KeySequenceBuffer()
        buffer.feed("g")
        buffer.reset()
        assert buffer.pending == ""


def test_unknown_first_key_is_invalid_immediately() -> None:
    buffer = KeySequenceBuffer()

    result = buffer.feed("q")

    assert result.should_clear and not result.is_partial
