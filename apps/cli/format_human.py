"""Human-readable todo list rendering for CLI output."""

from __future__ import annotations

from collections import Counter
from typing import Any


def render_todo_list(sorted_payload: dict[str, Any]) -> str:
    """Render one line per todo plus a short header."""

    todos: list[dict[str, Any]] = sorted_payload["todos"]
    lines: list[str] = []
    lines.append(f"todos: mode={sorted_payload['mode']} count={sorted_payload['count']}")

    rank_counter: Counter[str] = Counter(entry["rank"] for entry in todos)
    if rank_counter:
        ranks_text = ", ".join(f"{name}={rank_counter[name]}" for name in sorted(rank_counter))
        lines.append(f"ranks: {ranks_text}")
    else:
        lines.append("ranks: none")

    for entry in todos:
        lines.append(_render_entry(entry))
    return "\n".join(lines)


def _render_entry(entry: dict[str, Any]) -> str:
    parsed = entry["parsed"]
    status = entry["status"].strip() or "-"
    head = f"{parsed['priority'] or ''}{parsed['id_part'] or ''}"
    text = parsed["main_content"]
    if head:
        text = f"{head} {text}".rstrip()

    suffix: list[str] = [f"at={entry['location']}"]
    if parsed["created"]:
        suffix.append(f"created={parsed['created']}")
    if parsed["finished"]:
        suffix.append(f"finished={parsed['finished']}")

    return f"[{entry['rank']}] {status} {text} ({entry['category']}) " + " ".join(suffix)
