"""CLI I/O helpers for reading scanner output and writing sorted results."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.annotations.lifecycle import created_at, finished_at
from core.annotations.models import ParsedAnnotation
from core.annotations.parser import parse_annotation
from core.ordering.engine import TodoRecord
from core.ordering.models import TodosPayload
from core.status.classifier import StateSets, rank


def load_todos_payload(path: Path) -> TodosPayload:
    """Load scanner output JSON (``{"categories": [...]}``)."""

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid records JSON: {path}") from exc

    if not isinstance(raw, dict):
        raise ValueError("Records JSON must be an object")

    try:
        return TodosPayload.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid records schema: {path}") from exc


def annotation_to_dict(parsed: ParsedAnnotation) -> dict[str, Any]:
    """JSON-ready view of a parsed annotation including decoded instants."""

    created = created_at(parsed)
    finished = finished_at(parsed)
    return {
        "priority": parsed.priority,
        "id_part": parsed.id_part,
        "id_kind": _id_kind(parsed),
        "done_part": parsed.done_part,
        "main_content": parsed.main_content,
        "is_unique": parsed.is_unique,
        "is_valid_format": parsed.is_valid_format,
        "created": created.isoformat() if created is not None else None,
        "finished": finished.isoformat() if finished is not None else None,
    }


def build_sorted_payload(
    payload: TodosPayload,
    records: list[TodoRecord],
    *,
    mode: str,
    state_sets: StateSets,
) -> dict[str, Any]:
    """Build the JSON document describing an ordered todo list."""

    entries: list[dict[str, Any]] = []
    for position, record in enumerate(records):
        entries.append(
            {
                "position": position,
                "category": payload.category_name(record),
                "category_index": record.category_index,
                "item_index": record.item_index,
                "content": record.content,
                "location": record.location,
                "status": record.status,
                "rank": rank(record.status, state_sets).name,
                "parsed": annotation_to_dict(parse_annotation(record.content)),
            }
        )
    return {"mode": mode, "count": len(entries), "todos": entries}


def write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write JSON atomically using a temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, raw_tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=".tmp",
    )
    tmp_path = Path(raw_tmp_path)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(payload, tmp, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise


def _id_kind(parsed: ParsedAnnotation) -> str | None:
    if parsed.id_token is None:
        return None
    return type(parsed.id_token).__name__
