"""Filtering and deterministic ordering of scanned todo records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Literal

from core.annotations.parser import parse_annotation
from core.ordering.collation import compare_content
from core.status.classifier import StateSets, is_done_like, rank

FilterMode = Literal["all", "active", "closed"]
FILTER_MODES: tuple[FilterMode, ...] = ("all", "active", "closed")


@dataclass(frozen=True)
class TodoRecord:
    """A todo line as delivered by the scanner.

    category_index/item_index record the scan position and serve as the final
    tie-break, so records never swap places across reloads.
    """

    content: str
    location: str
    status: str
    category_index: int = 0
    item_index: int = 0

    @property
    def scan_position(self) -> tuple[int, int]:
        return self.category_index, self.item_index


def sort_content(record: TodoRecord) -> str:
    """Content used for ordering: parsed main content, else the raw content."""

    parsed = parse_annotation(record.content)
    if parsed.is_valid_format:
        return parsed.main_content
    return record.content


def compare(
    left: TodoRecord,
    right: TodoRecord,
    state_sets: StateSets | None,
    mode: FilterMode = "all",
) -> int:
    """Compare two records for ``mode``; returns -1, 0 or 1.

    active: rank, then content. all/closed: content only. Every mode ends with
    the scan position.
    """

    if mode not in FILTER_MODES:
        raise ValueError(f"Unsupported filter mode: {mode}")

    if mode == "active":
        left_rank = rank(left.status, state_sets)
        right_rank = rank(right.status, state_sets)
        if left_rank != right_rank:
            return -1 if left_rank < right_rank else 1

    result = compare_content(sort_content(left), sort_content(right))
    if result != 0:
        return result

    if left.scan_position == right.scan_position:
        return 0
    return -1 if left.scan_position < right.scan_position else 1


def matches_query(record: TodoRecord, query: str | None) -> bool:
    """Case-insensitive substring match on content or location."""

    if not query:
        return True
    needle = query.lower()
    return needle in record.content.lower() or needle in record.location.lower()


def filter_records(
    records: Iterable[TodoRecord],
    mode: FilterMode,
    state_sets: StateSets | None,
    query: str | None = None,
) -> list[TodoRecord]:
    """Keep records visible under ``mode`` and ``query`` in input order."""

    if mode not in FILTER_MODES:
        raise ValueError(f"Unsupported filter mode: {mode}")

    kept: list[TodoRecord] = []
    for record in records:
        if mode == "active" and is_done_like(record.status, state_sets):
            continue
        if mode == "closed" and not is_done_like(record.status, state_sets):
            continue
        if not matches_query(record, query):
            continue
        kept.append(record)
    return kept


def sort_records(
    records: Iterable[TodoRecord],
    mode: FilterMode,
    state_sets: StateSets | None,
    query: str | None = None,
) -> list[TodoRecord]:
    """Filter then order records for display."""

    kept = filter_records(records, mode, state_sets, query)
    key = cmp_to_key(lambda left, right: compare(left, right, state_sets, mode))
    return sorted(kept, key=key)
