"""
Auth API
Registration, login and password reset.

Endpoints:
    POST /api/auth/register         → Create account
    POST /api/auth/login            → Verify credentials, return user
    POST /api/auth/forgot-password  → Issue reset token, hand link to mailer
    POST /api/auth/reset-password   → Consume token, set new password
"""

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException

from core import (
    Settings,
    get_settings,
    RegisterRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    get_password_hash,
    verify_password,
    is_valid_email,
    password_strength_errors,
    generate_reset_token,
    public_user,
)
from db import DocumentStore, get_storage
from services import ResetMailer, build_reset_link, get_mailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

USERS = "users"


@router.post("/register")
async def register(
    request: RegisterRequest,
    store: DocumentStore = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    if request.email and not is_valid_email(request.email):
        raise HTTPException(400, "Invalid email format")

    errors = password_strength_errors(request.password)
    if errors:
        raise HTTPException(400, ", ".join(errors))

    if store.find_one(USERS, studentId=request.student_id):
        raise HTTPException(409, "Student already registered")

    doc = request.to_doc()
    doc["password"] = get_password_hash(request.password, settings.bcrypt_rounds)
    user = store.insert(USERS, doc)
    logger.info("registered student %s", request.student_id)

    return {"message": "Registered", "user": public_user(user)}


@router.post("/login")
async def login(request: LoginRequest, store: DocumentStore = Depends(get_storage)):
    user = store.find_one(USERS, studentId=request.student_id)
    if not user or not verify_password(request.password, user.get("password", "")):
        raise HTTPException(401, "Invalid credentials")

    return {"message": "Authenticated", "user": public_user(user)}


@router.post("/forgot-password")
async def forgot_password(
    request: ForgotPasswordRequest,
    store: DocumentStore = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    mailer: ResetMailer = Depends(get_mailer),
):
    user = store.find_one(USERS, email=request.email)
    if not user:
        raise HTTPException(404, "User not found")

    token = generate_reset_token()
    expiry = datetime.now(timezone.utc) + timedelta(seconds=settings.reset_token_ttl_seconds)
    store.update(USERS, user["_id"], {"resetToken": token, "resetTokenExpiry": expiry.isoformat()})

    mailer.send_reset_link(request.email, build_reset_link(settings.frontend_url, token, request.email))

    return {"message": "Password reset link sent to email"}


@router.post("/reset-password")
async def reset_password(
    request: ResetPasswordRequest,
    store: DocumentStore = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    errors = password_strength_errors(request.new_password)
    if errors:
        raise HTTPException(400, ", ".join(errors))

    user = store.find_one(USERS, email=request.email, resetToken=request.token)
    if not user:
        raise HTTPException(401, "Invalid or expired token")

    expiry = user.get("resetTokenExpiry")
    if not expiry or datetime.now(timezone.utc) > datetime.fromisoformat(expiry):
        raise HTTPException(401, "Token has expired")

    store.update(USERS, user["_id"], {
        "password": get_password_hash(request.new_password, settings.bcrypt_rounds),
        "resetToken": None,
        "resetTokenExpiry": None,
    })
    logger.info("password reset for %s", request.email)

    return {"message": "Password reset successfully"}
