"""Data models for parsed todo annotations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimestampId:
    """``@`` followed by a 5-character creation timestamp."""

    token: str

    @property
    def raw(self) -> str:
        return f"@{self.token}"


@dataclass(frozen=True)
class CounterId:
    """``##`` followed by a monotonically incremented counter."""

    digits: str

    @property
    def raw(self) -> str:
        return f"##{self.digits}"

    @property
    def value(self) -> int:
        return int(self.digits)


@dataclass(frozen=True)
class NanoId:
    """``#`` followed by a 20-character random id."""

    token: str

    @property
    def raw(self) -> str:
        return f"#{self.token}"


IdToken = TimestampId | CounterId | NanoId


@dataclass(frozen=True)
class ParsedAnnotation:
    """Structured view of one todo line.

    Rules:
    - is_valid_format is False when the line does not match the grammar; then
      only main_content is populated.
    - is_unique holds for timestamp and nanoid ids, never for counters.
    """

    main_content: str
    priority: str | None = None
    id_token: IdToken | None = None
    done_part: str | None = None
    is_valid_format: bool = False

    @property
    def id_part(self) -> str | None:
        return self.id_token.raw if self.id_token is not None else None

    @property
    def is_unique(self) -> bool:
        return isinstance(self.id_token, (TimestampId, NanoId))

    @property
    def done_token(self) -> str | None:
        """Completion timestamp without its ``@@`` marker."""

        return self.done_part[2:] if self.done_part is not None else None
