"""
Per-user Record APIs
One CRUD router per owned collection, all with the same shape.

Endpoints (for each collection c):
    GET    /api/c?userId=        → Caller's records, newest first
    POST   /api/c                → Create, returns {message, <singular>: record}
    PUT    /api/c/{id}?userId=   → Patch own record
    DELETE /api/c/{id}?userId=   → Delete own record

Ownership is checked on every write: unknown id → 404, other owner → 403.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Type

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from core import WireModel, ExpenseIn, TaskIn, EventIn, MoodIn, DiaryIn
from db import DocumentStore, get_storage

logger = logging.getLogger(__name__)

# Fields a patch may never touch
PROTECTED_FIELDS = ("_id", "userId", "createdAt")


@dataclass(frozen=True)
class RecordService:
    """Describes one owned collection"""
    collection: str
    singular: str
    model: Type[WireModel]
    tag: str


RECORD_SERVICES: List[RecordService] = [
    RecordService("expenses", "expense", ExpenseIn, "Expenses"),
    RecordService("tasks", "task", TaskIn, "Planner"),
    RecordService("events", "event", EventIn, "Events"),
    RecordService("moods", "mood", MoodIn, "Wellbeing"),
    RecordService("diary", "entry", DiaryIn, "Diary"),
]


def get_owned(store: DocumentStore, collection: str, record_id: str, user_id: str) -> dict:
    record = store.get(collection, record_id)
    if not record:
        raise HTTPException(404, f"{collection} record not found")
    if record.get("userId") != user_id:
        raise HTTPException(403, "Not authorized")
    return record


def build_record_router(service: RecordService) -> APIRouter:
    router = APIRouter(prefix=f"/{service.collection}", tags=[service.tag])
    model = service.model

    @router.get("")
    async def list_records(
        user_id: str = Query(..., alias="userId"),
        store: DocumentStore = Depends(get_storage),
    ):
        return store.find(service.collection, user_id=user_id)

    @router.post("")
    async def create_record(request: model, store: DocumentStore = Depends(get_storage)):
        record = store.insert(service.collection, request.to_doc())
        logger.debug("created %s %s", service.singular, record["_id"])
        return {"message": f"{service.singular.capitalize()} added", service.singular: record}

    @router.put("/{record_id}")
    async def update_record(
        record_id: str,
        user_id: str = Query(..., alias="userId"),
        patch: Dict[str, Any] = Body(...),
        store: DocumentStore = Depends(get_storage),
    ):
        get_owned(store, service.collection, record_id, user_id)
        changes = {k: v for k, v in patch.items() if k not in PROTECTED_FIELDS}
        record = store.update(service.collection, record_id, changes)
        return {"message": f"{service.singular.capitalize()} updated", service.singular: record}

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        user_id: str = Query(..., alias="userId"),
        store: DocumentStore = Depends(get_storage),
    ):
        get_owned(store, service.collection, record_id, user_id)
        store.delete(service.collection, record_id)
        return {"message": f"{service.singular.capitalize()} deleted"}

    return router


routers = [build_record_router(service) for service in RECORD_SERVICES]
