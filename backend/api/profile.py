"""
Profile API

Endpoints:
    GET /api/profile/user-stats/{user_id} → Per-collection counts
    GET /api/profile/{user_id}            → Public user record
    PUT /api/profile                      → Partial update, returns full record
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from core import ProfileUpdateRequest, is_valid_email, public_user
from db import DocumentStore, get_storage
from .feed import FEED, rename_user
from .records import RECORD_SERVICES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])

USERS = "users"


def find_user(store: DocumentStore, user_id: str):
    """Users are addressed by server id, or by student id for older clients"""
    return store.get(USERS, user_id) or store.find_one(USERS, studentId=user_id)


@router.get("/user-stats/{user_id}")
async def user_stats(user_id: str, store: DocumentStore = Depends(get_storage)):
    counts = {
        service.collection: store.count(service.collection, user_id)
        for service in RECORD_SERVICES
    }
    return {
        "totalExpenses": counts["expenses"],
        "totalExpenseAmount": store.sum_field("expenses", user_id, "amount"),
        "totalFeedPosts": store.count(FEED, user_id),
        "totalEvents": counts["events"],
        "totalTasks": counts["tasks"],
        "totalMoodLogs": counts["moods"],
        "totalDiaryEntries": counts["diary"],
    }


@router.get("/{user_id}")
async def get_profile(user_id: str, store: DocumentStore = Depends(get_storage)):
    user = find_user(store, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return {"user": public_user(user)}


@router.put("")
async def update_profile(request: ProfileUpdateRequest, store: DocumentStore = Depends(get_storage)):
    if request.email and not is_valid_email(request.email):
        raise HTTPException(400, "Invalid email format")

    user = find_user(store, request.user_id)
    if not user:
        raise HTTPException(404, "User not found")

    changes = request.changes()
    updated = store.update(USERS, user["_id"], changes)

    if "name" in changes:
        # Posts are keyed by the same identity the client uses
        rename_user(store, request.user_id, changes["name"])

    return {"message": "Profile updated", "user": public_user(updated)}
