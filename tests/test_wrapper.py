"""Unit tests for the line wrapper (format_lines.core.token_to_lines).

WHY: Wrapping decides where every subtitle line breaks. A wrong break
either overflows the player or splits a caption mid-clause, and the
paragraph rules decide where blank gaps appear in the editor.

HOW: All tests use the fixed-width stub (10px per character), so a line
of n characters is n * 10 pixels wide.

RULES:
- Width comparisons are strict (`>`): a line exactly at max_width fits.
- Tokens are never split.
"""

import pytest

from format_lines.core import token_to_lines

FONT = "16px sans-serif"


def _wrap(tokens, measurer, config, max_width=1000):
    return token_to_lines(tokens, measurer, FONT, max_width, config)


class TestGreedyWrapping:
    """Width-driven breaks."""

    def test_paragraph_scenario(self, measurer, config):
        tokens = ["Hello", " world", "", "Foo", "。", ""]
        assert _wrap(tokens, measurer, config) == ["Hello world", "Foo。"]

    def test_breaks_when_width_exceeded(self, measurer, config):
        assert _wrap(["aa", "bb", "cc"], measurer, config, max_width=40) == ["aabb", "cc"]

    def test_line_exactly_at_max_width_is_kept(self, measurer, config):
        assert _wrap(["abc", "de"], measurer, config, max_width=50) == ["abcde"]

    def test_one_pixel_over_breaks(self, measurer, config):
        assert _wrap(["abc", "de"], measurer, config, max_width=49) == ["abc", "de"]

    def test_overwide_single_token_stands_alone(self, measurer, config):
        assert _wrap(["abcdefgh"], measurer, config, max_width=30) == ["abcdefgh"]

    def test_overwide_token_between_others(self, measurer, config):
        lines = _wrap(["ab", "abcdefgh", "c"], measurer, config, max_width=30)
        assert lines == ["ab", "abcdefgh", "c"]

    def test_empty_input(self, measurer, config):
        assert _wrap([], measurer, config) == []

    def test_tokens_never_split(self, measurer, config):
        tokens = ["The", " quick", " brown", " fox", " jumps", " over", " the", " lazy", " dog"]
        lines = _wrap(tokens, measurer, config, max_width=100)
        assert "".join(lines) == "".join(tokens)
        # Every line is a concatenation of whole consecutive tokens
        index = 0
        for line in lines:
            rebuilt = ""
            while rebuilt != line:
                rebuilt += tokens[index]
                index += 1
                assert len(rebuilt) <= len(line)
        assert index == len(tokens)


class TestForcedBreaks:
    """Sentence-final punctuation closes the line regardless of width."""

    @pytest.mark.parametrize("suffix", ["。", "！", "？", "-"])
    def test_break_suffixes(self, measurer, config, suffix):
        lines = _wrap(["abc" + suffix, "def"], measurer, config)
        assert lines == ["abc" + suffix, "def"]

    def test_ascii_period_does_not_break(self, measurer, config):
        assert _wrap(["abc.", "def"], measurer, config) == ["abc.def"]

    def test_punctuation_token_appended_then_breaks(self, measurer, config):
        assert _wrap(["今日は", "晴れ", "。", "明日"], measurer, config) == ["今日は晴れ。", "明日"]

    def test_overflow_restart_token_is_not_checked_for_suffix(self, measurer, config):
        lines = _wrap(["aaaa", "bb。", "c"], measurer, config, max_width=50)
        assert lines == ["aaaa", "bb。c"]

    def test_custom_suffixes_from_config(self, measurer, config):
        config["break_suffixes"] = (".",)
        assert _wrap(["abc.", "def"], measurer, config) == ["abc.", "def"]


class TestEmptyTokens:
    """Empty tokens are paragraph markers."""

    def test_single_empty_token_only_closes_line(self, measurer, config):
        assert _wrap(["a", "", "b"], measurer, config) == ["a", "b"]

    def test_two_empty_tokens_emit_blank_line(self, measurer, config):
        assert _wrap(["a", "", "", "b"], measurer, config) == ["a", "", "b"]

    def test_three_or_more_empty_tokens_emit_one_blank_line(self, measurer, config):
        assert _wrap(["a", "", "", "", "", "b"], measurer, config) == ["a", "", "b"]

    def test_counter_resets_on_content(self, measurer, config):
        tokens = ["a", "", "", "b", "", "", "c"]
        assert _wrap(tokens, measurer, config) == ["a", "", "b", "", "c"]

    def test_leading_empty_tokens(self, measurer, config):
        assert _wrap(["", "", "a"], measurer, config) == ["", "a"]

    def test_empty_after_forced_break_adds_nothing(self, measurer, config):
        assert _wrap(["a。", "", "b"], measurer, config) == ["a。", "b"]
