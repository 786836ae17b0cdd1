"""Marker transitions between configured todo states."""

from __future__ import annotations

import enum

from core.status.classifier import (
    CANCELLED_INDEX,
    DONE_INDEX,
    TODO_INDEX,
    StateSets,
)
from core.utils.errors import StateCycleError

FALLBACK_TODO_MARKER = "- [ ] "
CYCLE_LENGTH = 4


class Direction(enum.Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


def default_todo_marker(state_sets: StateSets | None) -> str:
    """Marker used for newly added todos: the first set's TODO entry."""

    if state_sets and state_sets[0]:
        return state_sets[0][TODO_INDEX]
    return FALLBACK_TODO_MARKER


def done_marker_for(marker: str, state_sets: StateSets | None) -> str | None:
    """Return the DONE marker paired with an open ``marker``, if configured."""

    for state_set in state_sets or ():
        if len(state_set) > DONE_INDEX and state_set[TODO_INDEX] == marker:
            return state_set[DONE_INDEX]
    return None


def cycle_for(marker: str, state_sets: StateSets | None) -> tuple[list[str], int] | None:
    """Find the first four-state set containing ``marker`` and its position."""

    for state_set in state_sets or ():
        if len(state_set) != CYCLE_LENGTH:
            continue
        for index, candidate in enumerate(state_set):
            if candidate == marker:
                return list(state_set), index
    return None


def next_marker(
    marker: str,
    state_sets: StateSets | None,
    direction: Direction = Direction.FORWARD,
) -> str:
    """Move ``marker`` one step through its four-state cycle.

    Raises:
        StateCycleError: marker is not part of any four-state set.
    """

    cycle, index = require_cycle(marker, state_sets)
    return step_marker(cycle, index, direction)


def require_cycle(marker: str, state_sets: StateSets | None) -> tuple[list[str], int]:
    """Like cycle_for, but raises StateCycleError when nothing matches."""

    found = cycle_for(marker, state_sets)
    if found is None:
        raise StateCycleError(
            f"Marker '{marker}' not found in any configured 4-state cycle",
            marker=marker,
        )
    return found


def step_marker(cycle: list[str], index: int, direction: Direction) -> str:
    step = 1 if direction is Direction.FORWARD else -1
    return cycle[(index + step) % len(cycle)]


def is_timed_marker(marker: str, cycle: list[str]) -> bool:
    """DONE and CANCELLED entries carry a completion timestamp."""

    return marker in (cycle[DONE_INDEX], cycle[CANCELLED_INDEX])
