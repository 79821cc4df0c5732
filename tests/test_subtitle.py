"""Unit tests for time-code rendering and subtitle generation.

WHY: Downstream players and tools consume the subtitle text byte for byte,
including its non-standard time codes. Any change to the arithmetic shifts
every timestamp they have already stored.

HOW: calc_subtitle_time/format_subtitle_time are checked against hand-
computed values; generate_subtitle() is checked on small cue lists and on
the full format_newline() pipeline.

RULES:
- Hour is floor(s / 3600) + 1; minute is floor(s - hour); second is s mod 60.
- Only the last two digits of each component are kept.
- Cues are back to back starting at 0.
"""

import pytest

from format_lines import FixedWidthMeasurer, format_newline
from format_lines.core import (
    calc_subtitle_time,
    cue_timeline,
    format_subtitle_time,
    generate_subtitle,
)
from format_lines.models import Cue

FONT = "16px sans-serif"


class TestTimeCodes:
    """The established (quirky) time-code arithmetic."""

    @pytest.mark.parametrize("seconds, expected", [
        (0.0, "01:00:00,000"),
        (2.0, "01:02:02,000"),
        (4.0, "01:04:04,000"),
        (7.5, "01:07:07,000"),
        (59.0, "01:59:59,000"),
        (60.0, "01:60:00,000"),
        (125.0, "01:25:05,000"),
        (3600.0, "02:99:00,000"),
    ])
    def test_format_subtitle_time(self, seconds, expected):
        assert format_subtitle_time(seconds) == expected

    def test_components_are_two_digit_strings(self):
        assert calc_subtitle_time(9.0) == ("01", "09", "09")


class TestTimeline:
    """Cues are laid out back to back."""

    def test_back_to_back(self):
        cues = [Cue(2.0, "a"), Cue(8.0, "b"), Cue(3.0, "c")]
        timeline = cue_timeline(cues)
        assert timeline == [(0.0, 2.0), (2.0, 10.0), (10.0, 13.0)]
        assert timeline[0][0] == 0.0
        for previous, current in zip(timeline, timeline[1:]):
            assert current[0] == previous[1]

    def test_empty(self):
        assert cue_timeline([]) == []


class TestGenerateSubtitle:
    """Numbered subtitle blocks."""

    def test_two_blocks(self):
        cues = [Cue(2.0, "<b>a</b>"), Cue(8.0, "<b>b</b>")]
        assert generate_subtitle(cues) == (
            "1\n01:00:00,000 --> 01:02:02,000\n<b>a</b>\n\n"
            "2\n01:02:02,000 --> 01:10:10,000\n<b>b</b>\n\n"
        )

    def test_no_cues(self):
        assert generate_subtitle([]) == ""


class TestFormatNewline:
    """The whole wrap -> sequence -> render pipeline."""

    def test_paragraph_scenario(self):
        result = format_newline(
            ["Hello", " world", "", "Foo", "。", ""],
            FixedWidthMeasurer(10.0), FONT, 1000,
        )
        assert list(result.lines) == ["Hello world", "Foo。"]
        assert result.subtitle == (
            "1\n01:00:00,000 --> 01:05:05,000\n<b>Hello world</b>\n<b>Foo。</b>\n\n"
        )
        assert result.to_dict() == {
            "lines": ["Hello world", "Foo。"],
            "input": [{"insert": "Hello world\n"}, {"insert": "Foo。\n"}],
            "errors": [],
            "subtitle": result.subtitle,
        }

    def test_placeholder_cue(self):
        result = format_newline(["☆"], FixedWidthMeasurer(10.0), FONT, 1000)
        assert [cue.duration for cue in result.cues] == [2.0]
        assert result.subtitle == "1\n01:00:00,000 --> 01:02:02,000\n<b>☆</b>\n\n"

    def test_idempotent(self):
        tokens = ["今日は", "いい", "天気", "です", "ね。", "", "", "☆", "", "明日", "は", "雨", "かも"]
        first = format_newline(tokens, FixedWidthMeasurer(12.0), FONT, 48)
        second = format_newline(tokens, FixedWidthMeasurer(12.0), FONT, 48)
        assert first.to_dict() == second.to_dict()

    def test_overlong_token_reported(self):
        result = format_newline(["abcdefghij"], FixedWidthMeasurer(10.0), FONT, 50)
        assert result.to_dict()["errors"] == ["Sentences continue for more than three lines."]
        assert result.to_dict()["input"] == [{
            "insert": "abcdefghij\n",
            "attributes": {"caution": "too long sentence, cannot be splitted"},
        }]

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            format_newline(["a"], FixedWidthMeasurer(), FONT, 100, preset="cinema")

    def test_japanese_subtitle(self):
        tokens = ["今日は", "晴れ", "。", "明日は", "雨", "。", "", "", "☆"]
        result = format_newline(tokens, FixedWidthMeasurer(10.0), FONT, 1000)
        assert list(result.lines) == ["今日は晴れ。", "明日は雨。", "", "☆"]
        # 18 + 15 bytes -> 9 seconds, then the 2 second placeholder
        assert result.subtitle == (
            "1\n01:00:00,000 --> 01:09:09,000\n<b>今日は晴れ。</b>\n<b>明日は雨。</b>\n\n"
            "2\n01:09:09,000 --> 01:11:11,000\n<b>☆</b>\n\n"
        )

    @pytest.mark.parametrize("max_width", [True, 12.5, "100", None])
    def test_invalid_max_width(self, max_width):
        with pytest.raises(ValueError, match="max_width"):
            format_newline(["a"], FixedWidthMeasurer(), FONT, max_width)

    def test_zero_width_cautions_every_line(self):
        result = format_newline(["ab", "cd"], FixedWidthMeasurer(10.0), FONT, 0)
        assert list(result.lines) == ["ab", "cd"]
        assert all(run.attributes is not None for run in result.runs)
        assert result.errors == frozenset({"Sentences continue for more than three lines."})

    def test_custom_config_overrides_preset(self, config):
        config["placeholder_duration"] = 5.0
        result = format_newline(["☆"], FixedWidthMeasurer(), FONT, 100, config=config)
        assert result.cues[0].duration == 5.0

    def test_preset_not_mutated(self, config):
        from format_lines import PRESET_DEFAULT

        config["base_time"] = 1.0
        format_newline(["a"], FixedWidthMeasurer(), FONT, 100, config=config)
        assert PRESET_DEFAULT["base_time"] == 7.5
