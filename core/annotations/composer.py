"""Pure line rewrites used when todos are added, completed, or cycled.

Functions here take the marker and the content after it separately; the caller
owns locating the line on disk and splicing the result back in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from core.annotations.parser import parse_annotation, split_head
from core.annotations.timestamp import DEFAULT_CODEC, Clock, TimestampCodec
from core.status.classifier import StateSets
from core.status.transitions import (
    Direction,
    default_todo_marker,
    done_marker_for,
    is_timed_marker,
    require_cycle,
    step_marker,
)
from core.utils.errors import TodoCompositionError

_DONE_TOKEN_RE = re.compile(r"@@[A-Za-z0-9_\-]{5}")
_USER_PRIORITY_RE = re.compile(r"[A-Za-z0-9]+")
DEFAULT_PRIORITY = "1"


@dataclass(frozen=True)
class MarkDoneResult:
    marker: str
    content: str
    marker_transformed: bool


@dataclass(frozen=True)
class CycleResult:
    marker: str
    content: str


def compose_new_todo(
    content: str,
    *,
    marker: str | None = None,
    state_sets: StateSets | None = None,
    now: Clock | None = None,
    codec: TimestampCodec = DEFAULT_CODEC,
) -> str:
    """Build a new todo line with a fresh timestamp id.

    Rules:
    - newlines collapse to spaces and the text is trimmed
    - an alphanumeric first word becomes the priority, otherwise priority "1"
    - the marker defaults to the first configured TODO marker and is
      separated from the head by a space

    Raises:
        TodoCompositionError: content is empty after sanitizing.
    """

    sanitized = content.replace("\n", " ").strip()
    if not sanitized:
        raise TodoCompositionError("Cannot add empty todo", content=content)

    todo_marker = marker if marker is not None else default_todo_marker(state_sets)
    if todo_marker and not todo_marker[-1].isspace():
        todo_marker = f"{todo_marker} "

    first_word, _, rest = sanitized.partition(" ")
    if _USER_PRIORITY_RE.fullmatch(first_word):
        priority, body = first_word, rest.strip()
    else:
        priority, body = DEFAULT_PRIORITY, sanitized

    timestamp = codec.generate(now)
    return f"{todo_marker}{priority}@{timestamp} {body}".rstrip()


def stamp_done(
    content: str,
    *,
    now: Clock | None = None,
    codec: TimestampCodec = DEFAULT_CODEC,
) -> str:
    """Set the completion timestamp on the head word of ``content``.

    Rules:
    - ``content`` starts at the head; the head ends at the first ASCII whitespace
    - an existing ``@@`` token in the head is replaced, otherwise one is appended
    - content without a valid annotation head is returned unchanged
    """

    head, rest = split_head(content)
    parsed = parse_annotation(head)
    if not parsed.is_valid_format:
        return content

    done_token = f"@@{codec.generate(now)}"
    if parsed.done_part is not None:
        head = head[: -len(parsed.done_part)]
    return f"{head}{done_token}{rest}"


def strip_done(content: str) -> str:
    """Remove every completion timestamp from ``content``."""

    stripped = _DONE_TOKEN_RE.sub("", content).lstrip()
    if not stripped.strip():
        return ""
    return stripped


def mark_done(
    marker: str,
    content: str,
    state_sets: StateSets | None,
    *,
    now: Clock | None = None,
    codec: TimestampCodec = DEFAULT_CODEC,
) -> MarkDoneResult:
    """Switch an open todo to its DONE marker and stamp the completion time.

    The content is stamped even when no DONE marker is configured for
    ``marker``; marker_transformed reports whether the marker changed. Content
    without an annotation head keeps its text and only the marker changes.
    """

    done_marker = done_marker_for(marker, state_sets)
    stamped = stamp_done(content.lstrip(), now=now, codec=codec)
    return MarkDoneResult(
        marker=done_marker if done_marker is not None else marker,
        content=stamped,
        marker_transformed=done_marker is not None,
    )


def cycle_state(
    marker: str,
    content: str,
    state_sets: StateSets | None,
    direction: Direction = Direction.FORWARD,
    *,
    now: Clock | None = None,
    codec: TimestampCodec = DEFAULT_CODEC,
) -> CycleResult:
    """Advance ``marker`` through its four-state cycle and fix up the content.

    Entering DONE or CANCELLED stamps the completion time; leaving them removes
    it. Raises StateCycleError when the marker is in no four-state set.
    """

    cycle, index = require_cycle(marker, state_sets)
    new_marker = step_marker(cycle, index, direction)

    body = content.lstrip()
    if is_timed_marker(new_marker, cycle):
        body = stamp_done(body, now=now, codec=codec)
    elif is_timed_marker(marker, cycle):
        body = strip_done(body)

    return CycleResult(marker=new_marker, content=body.strip())
