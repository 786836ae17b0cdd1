"""Parser for the todo annotation micro-format.

A todo line starts with a head word followed by free text::

    [priority]<id>[@@done] content

The head is matched against the whole first word, so a token embedded in a
longer word never counts. Lines that do not fit the grammar are returned as
opaque content.
"""

from __future__ import annotations

from core.annotations.models import CounterId, IdToken, NanoId, ParsedAnnotation, TimestampId

ASCII_WHITESPACE = frozenset(" \t\n\r\x0b\x0c")
_ALNUM = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789")
_DIGITS = frozenset("0123456789")
_B64 = _ALNUM | {"-", "_"}

TIMESTAMP_ID_LENGTH = 5
NANO_ID_LENGTH = 20
DONE_MARKER = "@@"


def parse_annotation(line: str) -> ParsedAnnotation:
    """Parse one line of todo text.

    Rules:
    - Leading ASCII whitespace is skipped; the head is the first word.
    - head := priority? id_token done_token?
    - priority is [A-Za-z0-9]+ glued to the id token.
    - id_token is one of @B64{5}, ##DIGIT+, #B64{20}.
    - done_token is @@B64{5} and may only follow an id token.
    - Everything after the whitespace following the head is content (trimmed).

    Never raises for string input; a mismatch yields is_valid_format=False.
    """

    start = _skip_whitespace(line, 0)
    word, rest = split_head(line[start:])

    head = _parse_head(word)
    if head is None:
        return ParsedAnnotation(main_content=line.strip())

    priority, id_token, done_part = head
    return ParsedAnnotation(
        main_content=rest.strip(),
        priority=priority,
        id_token=id_token,
        done_part=done_part,
        is_valid_format=True,
    )


def split_head(text: str) -> tuple[str, str]:
    """Split ``text`` before its first ASCII whitespace.

    The separator stays at the start of the second part, so joining the two
    parts gives back ``text`` unchanged.
    """

    end = 0
    while end < len(text) and text[end] not in ASCII_WHITESPACE:
        end += 1
    return text[:end], text[end:]


def _parse_head(word: str) -> tuple[str | None, IdToken, str | None] | None:
    cursor = 0
    while cursor < len(word) and word[cursor] in _ALNUM:
        cursor += 1
    priority = word[:cursor] or None

    parsed_id = _parse_id_token(word, cursor)
    if parsed_id is None:
        return None
    id_token, cursor = parsed_id

    if cursor == len(word):
        return priority, id_token, None

    done_part = word[cursor:]
    if not _is_done_part(done_part):
        return None
    return priority, id_token, done_part


def _parse_id_token(word: str, cursor: int) -> tuple[IdToken, int] | None:
    rest = word[cursor:]

    if rest.startswith("@"):
        token = rest[1 : 1 + TIMESTAMP_ID_LENGTH]
        if len(token) == TIMESTAMP_ID_LENGTH and _all_in(token, _B64):
            return TimestampId(token), cursor + 1 + TIMESTAMP_ID_LENGTH
        return None

    if rest.startswith("##"):
        end = 2
        while end < len(rest) and rest[end] in _DIGITS:
            end += 1
        if end == 2:
            return None
        return CounterId(rest[2:end]), cursor + end

    if rest.startswith("#"):
        token = rest[1 : 1 + NANO_ID_LENGTH]
        if len(token) == NANO_ID_LENGTH and _all_in(token, _B64):
            return NanoId(token), cursor + 1 + NANO_ID_LENGTH
        return None

    return None


def _is_done_part(text: str) -> bool:
    token = text[len(DONE_MARKER) :]
    return (
        text.startswith(DONE_MARKER)
        and len(token) == TIMESTAMP_ID_LENGTH
        and _all_in(token, _B64)
    )


def _skip_whitespace(text: str, cursor: int) -> int:
    while cursor < len(text) and text[cursor] in ASCII_WHITESPACE:
        cursor += 1
    return cursor


def _all_in(text: str, allowed: frozenset[str]) -> bool:
    return all(char in allowed for char in text)
