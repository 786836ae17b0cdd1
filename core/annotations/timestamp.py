"""Compact timestamp tokens used by todo ids and completion markers.

A token is five characters from the URL-safe base64 alphabet and encodes the
number of whole seconds elapsed since ``CUSTOM_EPOCH``. Tokens sort in time
order and fit 30 bits (until roughly 2059); later instants wrap silently.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

CUSTOM_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)
URL_SAFE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
TOKEN_LENGTH = 5

_BITS_PER_CHAR = 6
_CHAR_MASK = 0x3F
_VALUE_MASK = 0x3FFFFFFF

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TimestampCodec:
    """Reversible mapping between instants and 5-character tokens."""

    epoch: datetime = CUSTOM_EPOCH
    alphabet: str = URL_SAFE_ALPHABET
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.alphabet) != 1 << _BITS_PER_CHAR:
            raise ValueError("Timestamp alphabet must contain exactly 64 symbols")
        object.__setattr__(
            self, "_index", {char: index for index, char in enumerate(self.alphabet)}
        )

    def encode(self, instant: datetime) -> str:
        """Encode ``instant`` as a fixed-width token.

        Instants before the epoch clamp to the epoch. Sub-second precision is
        truncated.
        """

        seconds = _unix_seconds(instant) - _unix_seconds(self.epoch)
        value = max(0, seconds) & _VALUE_MASK
        chars = [
            self.alphabet[(value >> shift) & _CHAR_MASK]
            for shift in range((TOKEN_LENGTH - 1) * _BITS_PER_CHAR, -1, -_BITS_PER_CHAR)
        ]
        return "".join(chars)

    def decode(self, token: str) -> datetime | None:
        """Decode a token back to a UTC instant, or ``None`` when malformed."""

        if len(token) != TOKEN_LENGTH:
            return None

        value = 0
        for char in token:
            index = self._index.get(char)
            if index is None:
                return None
            value = (value << _BITS_PER_CHAR) | index

        return self.epoch + timedelta(seconds=value)

    def is_token(self, text: str) -> bool:
        return len(text) == TOKEN_LENGTH and all(char in self._index for char in text)

    def generate(self, now: Clock | None = None) -> str:
        """Encode the current instant taken from ``now`` (wall clock by default)."""

        clock = now or utc_now
        return self.encode(clock())


DEFAULT_CODEC = TimestampCodec()


def encode_timestamp(instant: datetime) -> str:
    return DEFAULT_CODEC.encode(instant)


def decode_timestamp(token: str) -> datetime | None:
    return DEFAULT_CODEC.decode(token)


def generate_timestamp(now: Clock | None = None) -> str:
    return DEFAULT_CODEC.generate(now)


def _unix_seconds(instant: datetime) -> int:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return math.floor(instant.timestamp())
