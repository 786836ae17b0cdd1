"""Data models for scanner output consumed by the ordering engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from core.ordering.engine import TodoRecord


class TodoItemPayload(BaseModel):
    """One todo line as reported by the scanner."""

    model_config = ConfigDict(extra="forbid")

    content: str
    location: str
    status: str = ""


class TodoCategoryPayload(BaseModel):
    """A named group of todos (project, git repository, or other)."""

    model_config = ConfigDict(extra="forbid")

    name: str
    icon: str = ""
    todos: list[TodoItemPayload] = Field(default_factory=list)


class TodosPayload(BaseModel):
    """Full scanner output.

    Rules:
    - category order and todo order define the scan position
    - to_records() is the only place scan positions are assigned
    """

    model_config = ConfigDict(extra="forbid")

    categories: list[TodoCategoryPayload] = Field(default_factory=list)

    def to_records(self) -> list[TodoRecord]:
        records: list[TodoRecord] = []
        for category_index, category in enumerate(self.categories):
            for item_index, item in enumerate(category.todos):
                records.append(
                    TodoRecord(
                        content=item.content,
                        location=item.location,
                        status=item.status,
                        category_index=category_index,
                        item_index=item_index,
                    )
                )
        return records

    def category_name(self, record: TodoRecord) -> str:
        return self.categories[record.category_index].name
