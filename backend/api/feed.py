"""
Feed API
Shared student board: posts, likes, comments.

Endpoints:
    GET    /api/feed                                → Newest posts (all students)
    POST   /api/feed                                → Create post
    DELETE /api/feed/{post_id}?userId=              → Delete own post
    POST   /api/feed/{post_id}/like                 → Toggle like
    POST   /api/feed/{post_id}/comment              → Append comment
    DELETE /api/feed/{post_id}/comment/{id}?userId= → Delete own comment
    PUT    /api/users/{user_id}/name                → Propagate a rename
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core import (
    Settings,
    get_settings,
    FeedPostIn,
    LikeRequest,
    CommentRequest,
    UserNameUpdate,
)
from db import DocumentStore, get_storage, new_object_id, utc_now

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Feed"])

FEED = "feed"
DEFAULT_EVENT_COLOR = "#1976d2"

DATE_IN_TEXT = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
TIME_IN_TEXT = re.compile(r"\b(\d{2}:\d{2})\b")


def _match(pattern: re.Pattern, text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    found = pattern.search(text)
    return found.group(1) if found else None


def build_post_doc(request: FeedPostIn) -> dict:
    """Normalize event fields: only event posts carry them, filled from text when missing"""
    doc = request.to_doc()
    if request.category == "event":
        doc["eventName"] = request.event_name or request.text or "Event"
        doc["eventDate"] = request.event_date or _match(DATE_IN_TEXT, request.text)
        doc["eventTime"] = request.event_time or _match(TIME_IN_TEXT, request.text)
        doc["eventDescription"] = request.event_description or request.text
        doc["eventColor"] = request.event_color or DEFAULT_EVENT_COLOR
    else:
        for key in ("eventName", "eventDate", "eventTime", "eventDescription", "eventColor"):
            doc[key] = None
    doc["likes"] = []
    doc["comments"] = []
    doc["timestamp"] = utc_now()
    return doc


def _get_post(store: DocumentStore, post_id: str) -> dict:
    post = store.get(FEED, post_id)
    if not post:
        raise HTTPException(404, "Post not found")
    return post


def rename_user(store: DocumentStore, user_id: str, user_name: str) -> dict:
    """Rewrite the author name on a user's posts and comments"""
    posts_updated = 0
    comments_updated = 0

    for post in store.find(FEED):
        changed = False
        if post.get("userId") == user_id and post.get("userName") != user_name:
            post["userName"] = user_name
            posts_updated += 1
            changed = True
        comment_changed = False
        for comment in post.get("comments") or []:
            if comment.get("userId") == user_id and comment.get("userName") != user_name:
                comment["userName"] = user_name
                comment_changed = True
        if comment_changed:
            comments_updated += 1
            changed = True
        if changed:
            store.replace(FEED, post)

    logger.info(
        "renamed %s: %d posts, %d comment arrays", user_id, posts_updated, comments_updated
    )
    return {"postsUpdated": posts_updated, "commentsUpdated": comments_updated}


# =============================================================================
# Posts
# =============================================================================

@router.get("/feed")
async def list_posts(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    store: DocumentStore = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    # The board is shared; userId is accepted for a uniform client contract
    return store.find(FEED, limit=settings.feed_limit)


@router.post("/feed")
async def create_post(request: FeedPostIn, store: DocumentStore = Depends(get_storage)):
    if request.category == "event":
        if not (request.event_name or request.text):
            raise HTTPException(400, "Event posts need a name or text")
    elif not (request.text or "").strip() and not request.media_data:
        raise HTTPException(400, "Post needs text or an attachment")

    post = store.insert(FEED, build_post_doc(request))
    return {"message": "Post added", "post": post}


@router.delete("/feed/{post_id}")
async def delete_post(
    post_id: str,
    user_id: str = Query(..., alias="userId"),
    store: DocumentStore = Depends(get_storage),
):
    post = _get_post(store, post_id)
    if post.get("userId") != user_id:
        raise HTTPException(403, "Not authorized")

    store.delete(FEED, post_id)
    return {"message": "Post deleted"}


# =============================================================================
# Likes & Comments
# =============================================================================

@router.post("/feed/{post_id}/like")
async def toggle_like(post_id: str, request: LikeRequest, store: DocumentStore = Depends(get_storage)):
    post = _get_post(store, post_id)
    likes = post.get("likes") or []
    has_liked = request.user_id in likes

    if has_liked:
        post["likes"] = [uid for uid in likes if uid != request.user_id]
    else:
        post["likes"] = [*likes, request.user_id]

    store.replace(FEED, post)
    return {"message": "Unliked" if has_liked else "Liked", "post": post}


@router.post("/feed/{post_id}/comment")
async def add_comment(post_id: str, request: CommentRequest, store: DocumentStore = Depends(get_storage)):
    post = _get_post(store, post_id)
    comment = {
        "_id": new_object_id(),
        "userId": request.user_id,
        "userName": request.user_name,
        "text": request.text,
        "createdAt": utc_now(),
    }
    post["comments"] = [*(post.get("comments") or []), comment]

    store.replace(FEED, post)
    return {"message": "Comment added", "post": post}


@router.delete("/feed/{post_id}/comment/{comment_id}")
async def delete_comment(
    post_id: str,
    comment_id: str,
    user_id: str = Query(..., alias="userId"),
    store: DocumentStore = Depends(get_storage),
):
    post = _get_post(store, post_id)
    comments = post.get("comments") or []

    comment = next((c for c in comments if c.get("_id") == comment_id), None)
    if not comment:
        raise HTTPException(404, "Comment not found")
    if comment.get("userId") != user_id:
        raise HTTPException(403, "Not authorized")

    post["comments"] = [c for c in comments if c.get("_id") != comment_id]
    store.replace(FEED, post)
    return {"message": "Comment deleted", "post": post}


# =============================================================================
# User rename propagation
# =============================================================================

@router.put("/users/{user_id}/name")
async def update_user_name(user_id: str, request: UserNameUpdate, store: DocumentStore = Depends(get_storage)):
    result = rename_user(store, user_id, request.user_name)
    return {"message": "Username updated", **result}
