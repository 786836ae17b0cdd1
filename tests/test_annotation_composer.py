from __future__ import annotations

from datetime import timedelta

import pytest

from core.annotations.composer import (
    compose_new_todo,
    cycle_state,
    mark_done,
    stamp_done,
    strip_done,
)
from core.annotations.parser import parse_annotation
from core.annotations.timestamp import CUSTOM_EPOCH
from core.status.transitions import Direction
from core.utils.errors import StateCycleError, TodoCompositionError

CONFIG = [
    ["TODO", "DOING", "DONE", "CANCELLED"],
    ["- [ ] ", "- [-] ", "- [x] "],
]


def fixed_clock():
    return CUSTOM_EPOCH + timedelta(seconds=86400)


def test_compose_uses_alphanumeric_first_word_as_priority() -> None:
    line = compose_new_todo("2 write docs", state_sets=CONFIG, now=fixed_clock)

    assert line == "TODO 2@AAVGA write docs"


def test_compose_defaults_priority_when_first_word_has_punctuation() -> None:
    line = compose_new_todo("fix, then ship", marker="- [ ] ", now=fixed_clock)

    assert line == "- [ ] 1@AAVGA fix, then ship"


def test_compose_collapses_newlines_and_trims() -> None:
    line = compose_new_todo("  a1\nsplit\nlines  ", marker="", now=fixed_clock)

    assert line == "a1@AAVGA split lines"


def test_compose_result_parses_as_unique_annotation() -> None:
    line = compose_new_todo("3 review", marker="", now=fixed_clock)
    parsed = parse_annotation(line)

    assert parsed.is_valid_format is True
    assert parsed.is_unique is True
    assert parsed.priority == "3"
    assert parsed.id_part == "@AAVGA"
    assert parsed.main_content == "review"


def test_compose_without_config_uses_checkbox_marker() -> None:
    assert compose_new_todo("x", now=fixed_clock) == "- [ ] x@AAVGA"


@pytest.mark.parametrize("content", ["", "   ", "\n\n"])
def test_compose_rejects_empty_content(content: str) -> None:
    with pytest.raises(TodoCompositionError, match="Cannot add empty todo"):
        compose_new_todo(content, now=fixed_clock)


def test_stamp_done_appends_to_first_word() -> None:
    assert stamp_done("1@AAAAB task text", now=fixed_clock) == "1@AAAAB@@AAVGA task text"


def test_stamp_done_replaces_existing_token() -> None:
    assert stamp_done("1@AAAAB@@AAAAC task", now=fixed_clock) == "1@AAAAB@@AAVGA task"


@pytest.mark.parametrize("content", ["", "fix the bug", "see 1@AAAAB later"])
def test_stamp_done_leaves_unannotated_content_unchanged(content: str) -> None:
    assert stamp_done(content, now=fixed_clock) == content


def test_stamp_done_keeps_tab_after_head() -> None:
    stamped = stamp_done("1@AAAAB\ttask", now=fixed_clock)

    assert stamped == "1@AAAAB@@AAVGA\ttask"
    assert parse_annotation(stamped).done_part == "@@AAVGA"


def test_strip_done_removes_tokens() -> None:
    assert strip_done("1@AAAAB@@AAAAC task") == "1@AAAAB task"
    assert strip_done("@@AAAAC") == ""


def test_mark_done_switches_marker_and_stamps() -> None:
    result = mark_done("TODO", " 1@AAAAB task", CONFIG, now=fixed_clock)

    assert result.marker == "DONE"
    assert result.content == "1@AAAAB@@AAVGA task"
    assert result.marker_transformed is True


def test_mark_done_on_three_state_set() -> None:
    result = mark_done("- [ ] ", "1@AAAAB task", CONFIG, now=fixed_clock)

    assert result.marker == "- [x] "
    assert result.marker_transformed is True


def test_mark_done_without_matching_todo_marker_keeps_marker() -> None:
    result = mark_done("DOING", "1@AAAAB task", CONFIG, now=fixed_clock)

    assert result.marker == "DOING"
    assert result.content == "1@AAAAB@@AAVGA task"
    assert result.marker_transformed is False


def test_mark_done_stamps_tab_separated_head() -> None:
    result = mark_done("TODO", "1@AAAAB\ttask", CONFIG, now=fixed_clock)
    parsed = parse_annotation(result.content)

    assert result.content == "1@AAAAB@@AAVGA\ttask"
    assert parsed.done_part == "@@AAVGA"
    assert parsed.main_content == "task"


def test_mark_done_on_plain_text_only_switches_marker() -> None:
    result = mark_done("TODO", "fix the bug", CONFIG, now=fixed_clock)

    assert result.marker == "DONE"
    assert result.content == "fix the bug"
    assert result.marker_transformed is True


def test_cycle_into_done_stamps_tab_separated_head() -> None:
    result = cycle_state("DOING", "1@AAAAB\ttask", CONFIG, now=fixed_clock)
    parsed = parse_annotation(result.content)

    assert result.marker == "DONE"
    assert parsed.done_part == "@@AAVGA"
    assert parsed.main_content == "task"


def test_cycle_out_of_done_strips_tab_separated_head() -> None:
    result = cycle_state("CANCELLED", "1@AAAAB@@AAAAC\ttask", CONFIG, now=fixed_clock)

    assert result.marker == "TODO"
    assert result.content == "1@AAAAB\ttask"


def test_cycle_forward_through_open_states_keeps_content() -> None:
    result = cycle_state("TODO", "1@AAAAB task", CONFIG, now=fixed_clock)

    assert result.marker == "DOING"
    assert result.content == "1@AAAAB task"


def test_cycle_into_done_stamps_completion() -> None:
    result = cycle_state("DOING", "1@AAAAB task", CONFIG, now=fixed_clock)

    assert result.marker == "DONE"
    assert result.content == "1@AAAAB@@AAVGA task"


def test_cycle_from_done_to_cancelled_restamps() -> None:
    result = cycle_state("DONE", "1@AAAAB@@AAAAC task", CONFIG, now=fixed_clock)

    assert result.marker == "CANCELLED"
    assert result.content == "1@AAAAB@@AAVGA task"


def test_cycle_wraps_and_strips_completion() -> None:
    result = cycle_state("CANCELLED", "1@AAAAB@@AAAAC task", CONFIG, now=fixed_clock)

    assert result.marker == "TODO"
    assert result.content == "1@AAAAB task"


def test_cycle_backward_from_todo_enters_cancelled() -> None:
    result = cycle_state(
        "TODO", "1@AAAAB task", CONFIG, Direction.BACKWARD, now=fixed_clock
    )

    assert result.marker == "CANCELLED"
    assert result.content == "1@AAAAB@@AAVGA task"


def test_cycle_backward_from_done_strips_completion() -> None:
    result = cycle_state(
        "DONE", "1@AAAAB@@AAAAC task", CONFIG, Direction.BACKWARD, now=fixed_clock
    )

    assert result.marker == "DOING"
    assert result.content == "1@AAAAB task"


@pytest.mark.parametrize("marker", ["WAITING", "- [ ] "])
def test_cycle_requires_four_state_set(marker: str) -> None:
    with pytest.raises(StateCycleError) as excinfo:
        cycle_state(marker, "1@AAAAB task", CONFIG, now=fixed_clock)

    assert excinfo.value.marker == marker
    assert "4-state cycle" in str(excinfo.value)
