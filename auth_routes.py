"""Account routes: register, login, logout, current user."""
import re as _re
import time
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from log import get_logger
from models import AuthRequest
from auth import (
    get_db, hash_password, verify_password,
    create_session, delete_session, extract_bearer_token, require_user,
)

logger = get_logger("beonyeok.auth_routes")

router = APIRouter()


@router.post("/api/auth/register", tags=["Auth"], summary="Register a new user")
async def auth_register(req: AuthRequest):
    username = req.username.strip()
    password = req.password
    if not username or len(username) < 2 or len(username) > 30:
        raise HTTPException(400, "Username must be 2-30 characters")
    if not _re.match(r'^[a-zA-Z0-9_.@-]+$', username):
        raise HTTPException(400, "Username can only contain letters, numbers, dots, @, hyphens, underscores")
    if not password or len(password) < 6:
        raise HTTPException(400, "Password must be at least 6 characters")

    conn = get_db()
    existing = conn.execute("SELECT id FROM users WHERE username = ?", (username,)).fetchone()
    if existing:
        conn.close()
        raise HTTPException(409, "Username already taken")

    pw_hash = hash_password(password)
    cursor = conn.execute("INSERT INTO users (username, password_hash, created_at) VALUES (?, ?, ?)",
                          (username, pw_hash, time.time()))
    user_id = cursor.lastrowid
    conn.commit()
    conn.close()
    logger.info("User registered", extra={"component": "auth", "user_id": user_id})

    token = create_session(user_id)
    return {"token": token, "username": username}


@router.post("/api/auth/login", tags=["Auth"], summary="Log in and get a session token")
async def auth_login(req: AuthRequest):
    username = req.username.strip()
    conn = get_db()
    row = conn.execute("SELECT id, password_hash FROM users WHERE username = ?", (username,)).fetchone()
    conn.close()
    if not row or not verify_password(req.password, row["password_hash"]):
        raise HTTPException(401, "Invalid username or password")

    token = create_session(row["id"])
    return {"token": token, "username": username}


@router.post("/api/auth/logout", tags=["Auth"], summary="Log out and invalidate token")
async def auth_logout(authorization: Optional[str] = Header(default=None)):
    token = extract_bearer_token(authorization)
    if token:
        delete_session(token)
    return {"ok": True}


@router.get("/api/auth/me", tags=["Auth"], summary="Get current user info")
async def auth_me(user: dict = Depends(require_user)):
    return {"username": user["username"]}
