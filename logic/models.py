from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: int
    name: str

    @classmethod
    def from_row(cls, row: dict) -> "Category":
        return cls(id=int(row["id"]), name=row.get("name_category") or "")


@dataclass(frozen=True)
class Question:
    id: int
    category_id: int
    question: str
    answer: str
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict) -> "Question":
        return cls(
            id=int(row["id"]),
            category_id=int(row["category_id"]),
            question=row.get("question") or "",
            answer=row.get("answer") or "",
            is_active=bool(row.get("is_active", True)),
        )
