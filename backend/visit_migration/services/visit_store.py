from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection

from ..schemas.visits import DeleteField, FieldEdit, SetField


class VisitUpdateError(RuntimeError):
    pass


def build_update(edits: list[FieldEdit]) -> dict[str, dict[str, Any]]:
    """필드 수정 목록을 $set/$unset 업데이트 문서로 변환"""
    update: dict[str, dict[str, Any]] = {}
    for edit in edits:
        if isinstance(edit, DeleteField):
            update.setdefault("$unset", {})[edit.name] = ""
        elif isinstance(edit, SetField):
            update.setdefault("$set", {})[edit.name] = edit.value
    return update


class VisitRepository:
    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    async def fetch_all(self) -> list[dict]:
        return [doc async for doc in self.collection.find({})]

    async def apply_edits(self, visit_id: Any, edits: list[FieldEdit]) -> None:
        update = build_update(edits)
        if not update:
            return
        result = await self.collection.update_one({"_id": visit_id}, update)
        if result.matched_count == 0:
            raise VisitUpdateError(f"Document {visit_id} not found")

    async def sample(self, limit: int) -> list[dict]:
        if limit <= 0:
            return []
        cursor = self.collection.find({}).limit(limit)
        return [doc async for doc in cursor]
