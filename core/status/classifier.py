"""Status marker classification against configured state sets.

Each state set lists markers by fixed position: TODO, DOING, DONE, CANCELLED.
Sets may be shorter than four entries. Without any state set every marker is
UNKNOWN, which callers treat as a degraded but valid state.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence

StateSets = Sequence[Sequence[str]]

TODO_INDEX = 0
DOING_INDEX = 1
DONE_INDEX = 2
CANCELLED_INDEX = 3


class Rank(enum.IntEnum):
    """Sort rank of a status marker; lower sorts first."""

    DOING = 1
    TODO = 2
    OTHER_ACTIVE = 3
    DONE_LIKE = 4
    UNKNOWN = 5


def is_done_like(marker: str, state_sets: StateSets | None) -> bool:
    """Return True if ``marker`` is the DONE or CANCELLED entry of any set."""

    for state_set in state_sets or ():
        if _matches_at(state_set, DONE_INDEX, marker) or _matches_at(
            state_set, CANCELLED_INDEX, marker
        ):
            return True
    return False


def rank(marker: str, state_sets: StateSets | None) -> Rank:
    """Map ``marker`` to its sort rank.

    Unmatched markers that are not done-like rank as OTHER_ACTIVE.
    """

    if not state_sets:
        return Rank.UNKNOWN
    if is_done_like(marker, state_sets):
        return Rank.DONE_LIKE

    for state_set in state_sets:
        if _matches_at(state_set, DOING_INDEX, marker):
            return Rank.DOING
        if _matches_at(state_set, TODO_INDEX, marker):
            return Rank.TODO
    return Rank.OTHER_ACTIVE


def _matches_at(state_set: Sequence[str], index: int, marker: str) -> bool:
    return len(state_set) > index and state_set[index] == marker
