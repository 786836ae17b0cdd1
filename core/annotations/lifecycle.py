"""Creation/completion instants derived from parsed annotations."""

from __future__ import annotations

from datetime import datetime

from core.annotations.models import ParsedAnnotation, TimestampId
from core.annotations.timestamp import DEFAULT_CODEC, TimestampCodec


def created_at(
    parsed: ParsedAnnotation, codec: TimestampCodec = DEFAULT_CODEC
) -> datetime | None:
    """Creation instant for timestamp ids; counters and nanoids carry none."""

    if not isinstance(parsed.id_token, TimestampId):
        return None
    return codec.decode(parsed.id_token.token)


def finished_at(
    parsed: ParsedAnnotation, codec: TimestampCodec = DEFAULT_CODEC
) -> datetime | None:
    token = parsed.done_token
    if token is None:
        return None
    return codec.decode(token)
