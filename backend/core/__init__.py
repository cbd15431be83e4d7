"""
Core Module
Configuration, request models and credential helpers.

Exports:
    Config: Settings, get_settings
    Models: request bodies for every service
    Security: password hashing and validation helpers
"""

from .config import Settings, get_settings
from .models import (
    WireModel,
    RegisterRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ProfileUpdateRequest,
    ExpenseIn,
    TaskIn,
    EventIn,
    MoodIn,
    DiaryIn,
    FeedPostIn,
    LikeRequest,
    CommentRequest,
    UserNameUpdate,
)
from .security import (
    get_password_hash,
    verify_password,
    is_valid_email,
    password_strength_errors,
    generate_reset_token,
    public_user,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Models
    "WireModel",
    "RegisterRequest",
    "LoginRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "ProfileUpdateRequest",
    "ExpenseIn",
    "TaskIn",
    "EventIn",
    "MoodIn",
    "DiaryIn",
    "FeedPostIn",
    "LikeRequest",
    "CommentRequest",
    "UserNameUpdate",
    # Security
    "get_password_hash",
    "verify_password",
    "is_valid_email",
    "password_strength_errors",
    "generate_reset_token",
    "public_user",
]
