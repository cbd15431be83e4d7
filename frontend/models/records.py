"""
Typed Records
Shapes of the items the client caches, exactly as the services send them.

Every record carries either a server identifier (`_id` on the wire) or a
local one (`id`, a millisecond clock reading assigned when created on this
device). Unknown fields from the services are kept, so a cached record
round-trips without loss.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for every cached item"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    server_id: Optional[str] = Field(default=None, alias="_id")
    local_id: Optional[int] = Field(default=None, alias="id")
    user_id: Optional[str] = None
    created_at: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def payload(self) -> Dict[str, Any]:
        """Body for a create request: everything but identifiers"""
        data = self.to_wire()
        for key in ("_id", "id", "createdAt"):
            data.pop(key, None)
        return data


# =============================================================================
# Domain records
# =============================================================================

class Expense(Record):
    title: str
    amount: float
    date: str


class Task(Record):
    title: str
    due_date: str
    time: Optional[str] = None
    completed: bool = False


class Event(Record):
    name: str
    date: str
    time: Optional[str] = None
    description: Optional[str] = None
    color: str = "#1976d2"


class MoodLog(Record):
    date: str
    mood: str
    suggestion: Optional[str] = None
    affirmation: Optional[str] = None


class DiaryEntry(Record):
    title: str = "Untitled entry"
    date: str
    message: str


class Comment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    server_id: Optional[str] = Field(default=None, alias="_id")
    user_id: Optional[str] = None
    user_name: str = "Anonymous"
    text: str = ""
    created_at: Optional[str] = None


class FeedCategory(str, Enum):
    GENERAL = "general"
    EVENT = "event"
    ACADEMIC = "academic"
    SOCIAL = "social"

    @property
    def label(self) -> str:
        labels = {
            "general": "💬 General",
            "event": "📅 Event",
            "academic": "📚 Academic",
            "social": "🎉 Social",
        }
        return labels.get(self.value, self.value)


class FeedPost(Record):
    user_name: str = "Anonymous"
    text: Optional[str] = None
    category: str = FeedCategory.GENERAL.value
    event_name: Optional[str] = None
    event_date: Optional[str] = None
    event_time: Optional[str] = None
    event_description: Optional[str] = None
    event_color: Optional[str] = None
    media_data: Optional[str] = None
    media_type: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    likes: List[str] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    timestamp: Optional[str] = None

    @property
    def is_event(self) -> bool:
        return self.category == FeedCategory.EVENT.value

    def liked_by(self, user_id: str) -> bool:
        return user_id in self.likes


class Note(Record):
    """Personal dashboard note; lives only on this device"""
    text: str
    date: str
    file_data: Optional[str] = None
    file_name: Optional[str] = None
    timestamp: Optional[str] = None


class UserProfile(BaseModel):
    """The logged-in user as returned by auth/profile services"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    server_id: Optional[str] = Field(default=None, alias="_id")
    student_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    batch: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def identity(self) -> Optional[str]:
        """Key the services scope records by: server id, else student id"""
        return self.server_id or self.student_id or None

    @property
    def display_name(self) -> str:
        return self.name or self.student_id or "Student"

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
