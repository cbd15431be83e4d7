"""
Domain Models
The SINGLE SOURCE OF TRUTH for request formats.

Wire format is camelCase (userId, dueDate, ...) because the client stores
records exactly as the services return them. Python code uses snake_case;
aliases bridge the two.
"""

from typing import Optional, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for all request bodies"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_doc(self) -> dict:
        """Document body as stored (camelCase keys)"""
        return self.model_dump(by_alias=True)


# =============================================================================
# Auth
# =============================================================================

class RegisterRequest(WireModel):
    student_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    batch: Optional[str] = None


class LoginRequest(WireModel):
    student_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(WireModel):
    email: str = Field(..., min_length=1)


class ResetPasswordRequest(WireModel):
    email: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


# =============================================================================
# Profile
# =============================================================================

class ProfileUpdateRequest(WireModel):
    """Partial update: only non-empty fields are applied"""
    user_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    avatar: Optional[str] = None

    def changes(self) -> dict:
        updates = {}
        for key in ("name", "email", "phone", "department"):
            value = getattr(self, key)
            if value:
                updates[key] = value
        # avatar may be explicitly cleared with ""
        if "avatar" in self.model_fields_set:
            updates["avatar"] = self.avatar
        return updates


# =============================================================================
# Per-user records
# =============================================================================

class ExpenseIn(WireModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    amount: float
    date: str = Field(..., min_length=1)


class TaskIn(WireModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    due_date: str = Field(..., min_length=1)
    time: Optional[str] = None
    completed: bool = False


class EventIn(WireModel):
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    time: Optional[str] = None
    description: Optional[str] = None
    color: str = "#1976d2"


class MoodIn(WireModel):
    user_id: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    mood: str = Field(..., min_length=1)
    suggestion: Optional[str] = None
    affirmation: Optional[str] = None


class DiaryIn(WireModel):
    user_id: str = Field(..., min_length=1)
    title: str = "Untitled entry"
    date: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


# =============================================================================
# Feed
# =============================================================================

FeedCategory = Literal["general", "event", "academic", "social"]


class FeedPostIn(WireModel):
    user_id: str = Field(..., min_length=1)
    user_name: str = "Anonymous"
    text: Optional[str] = None
    category: FeedCategory = "general"
    event_name: Optional[str] = None
    event_date: Optional[str] = None
    event_time: Optional[str] = None
    event_description: Optional[str] = None
    event_color: Optional[str] = None
    media_data: Optional[str] = None
    media_type: Optional[Literal["image", "pdf", "video"]] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return v or "general"


class LikeRequest(WireModel):
    user_id: str = Field(..., min_length=1)


class CommentRequest(WireModel):
    user_id: str = Field(..., min_length=1)
    user_name: str = "Anonymous"
    text: str = Field(..., min_length=1)


class UserNameUpdate(WireModel):
    user_name: str = Field(..., min_length=1)
