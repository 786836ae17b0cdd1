"""Character collation used to order todo content.

Digits sort first, then uppercase, lowercase, ``-``, ``_``, space, and every
other character last. The order is persisted visually, so it must not depend
on locale.
"""

from __future__ import annotations

import string

OTHER_RANK = 65


def _build_rank_table() -> tuple[int, ...]:
    table = [OTHER_RANK] * 256
    ordered = string.digits + string.ascii_uppercase + string.ascii_lowercase + "-_ "
    for rank_value, char in enumerate(ordered):
        table[ord(char)] = rank_value
    return tuple(table)


CHAR_RANKS = _build_rank_table()


def char_rank(char: str) -> int:
    code = ord(char)
    if code < len(CHAR_RANKS):
        return CHAR_RANKS[code]
    return OTHER_RANK


def compare_content(left: str, right: str) -> int:
    """Compare two strings under the todo collation; returns -1, 0 or 1.

    Rules:
    - first differing character decides by rank
    - equal ranks on different characters fall back to code point order
    - a strict prefix sorts before the longer string
    """

    for left_char, right_char in zip(left, right):
        if left_char == right_char:
            continue
        left_rank = char_rank(left_char)
        right_rank = char_rank(right_char)
        if left_rank != right_rank:
            return -1 if left_rank < right_rank else 1
        return -1 if left_char < right_char else 1

    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1
