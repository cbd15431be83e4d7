"""
Form validation.
Every check runs before any network call and raises ValidationError with
the message the form should show inline.
"""

import base64
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from state.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_NOTE_ATTACHMENT_BYTES = 5 * 1024 * 1024
MAX_FEED_ATTACHMENT_BYTES = 10 * 1024 * 1024

# mime type -> media kind the feed service stores
FEED_MEDIA_TYPES = {
    "image/jpeg": "image",
    "image/png": "image",
    "image/gif": "image",
    "application/pdf": "pdf",
    "video/mp4": "video",
    "video/webm": "video",
}


def _required(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


def validate_email(email: Optional[str]) -> str:
    email = _required(email, "Email")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    return email


def validate_password(password: Optional[str]) -> str:
    if not password:
        raise ValidationError("Password is required")
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain an uppercase letter")
    if not re.search(r"\d", password):
        raise ValidationError("Password must contain a number")
    return password


# =============================================================================
# Auth forms
# =============================================================================

def validate_login(student_id: str, password: str) -> Tuple[str, str]:
    student_id = _required(student_id, "Student ID")
    if not password:
        raise ValidationError("Password is required")
    return student_id, password


def validate_registration(
    student_id: str,
    name: str,
    email: str,
    password: str,
    phone: str = "",
    department: str = "",
    batch: str = "",
) -> Dict[str, Any]:
    """Returns the wire body for POST /auth/register"""
    body = {
        "studentId": _required(student_id, "Student ID"),
        "name": _required(name, "Name"),
        "email": validate_email(email),
        "password": validate_password(password),
    }
    for key, value in (("phone", phone), ("department", department), ("batch", batch)):
        if value and value.strip():
            body[key] = value.strip()
    return body


def validate_reset(new_password: str, confirm_password: str) -> str:
    validate_password(new_password)
    if new_password != confirm_password:
        raise ValidationError("Passwords do not match")
    return new_password


# =============================================================================
# Record forms
# =============================================================================

def validate_expense(title: str, amount: Any, date: str) -> Dict[str, Any]:
    title = _required(title, "Title")
    date = _required(date, "Date")
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number")
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    return {"title": title, "amount": amount, "date": date}


def validate_task(title: str, due_date: str, time: Optional[str] = None) -> Dict[str, Any]:
    return {
        "title": _required(title, "Task"),
        "due_date": _required(due_date, "Due date"),
        "time": time or None,
    }


def validate_event(name: str, date: str, time: Optional[str] = None, description: str = "") -> Dict[str, Any]:
    return {
        "name": _required(name, "Event name"),
        "date": _required(date, "Date"),
        "time": time or None,
        "description": description.strip() or None,
    }


def validate_diary(title: str, date: str, message: str) -> Dict[str, Any]:
    return {
        "title": (title or "").strip() or "Untitled entry",
        "date": _required(date, "Date"),
        "message": _required(message, "Entry"),
    }


def validate_note(text: str, attachment: Optional["Attachment"] = None) -> str:
    text = (text or "").strip()
    if not text and attachment is None:
        raise ValidationError("Write something or attach a file")
    return text


def validate_feed_post(text: str, category: str, attachment: Optional["Attachment"] = None) -> str:
    text = (text or "").strip()
    if category == "event":
        if not text:
            raise ValidationError("Event posts need a description")
    elif not text and attachment is None:
        raise ValidationError("Write something or attach a file")
    return text


def validate_comment(text: str) -> str:
    return _required(text, "Comment")


# =============================================================================
# Attachments
# =============================================================================

@dataclass(frozen=True)
class Attachment:
    """An uploaded file converted to a data URI"""
    name: str
    mime_type: str
    size: int
    data_uri: str

    @property
    def media_kind(self) -> Optional[str]:
        return FEED_MEDIA_TYPES.get(self.mime_type)


def to_data_uri(content: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def read_attachment(
    name: str,
    content: bytes,
    mime_type: Optional[str],
    max_bytes: int,
    allowed_types: Optional[Dict[str, str]] = None,
) -> Attachment:
    """Check size/type limits, then encode. Completes before any submission."""
    mime_type = mime_type or "application/octet-stream"
    if len(content) > max_bytes:
        raise ValidationError(f"File must be {max_bytes // (1024 * 1024)} MB or smaller")
    if allowed_types is not None and mime_type not in allowed_types:
        raise ValidationError("Unsupported file type")
    return Attachment(name=name, mime_type=mime_type, size=len(content), data_uri=to_data_uri(content, mime_type))
