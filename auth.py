"""User authentication, session management, and rate limiting."""
import os
import time
import bcrypt
import secrets
import sqlite3
from typing import Optional
from pathlib import Path
from collections import defaultdict

from fastapi import Header, HTTPException, Request

from log import get_logger

logger = get_logger("beonyeok.auth")

# --- Config ---
SESSION_TTL = 30 * 24 * 3600  # 30 days

# --- Rate Limiting ---
RATE_LIMIT_REQUESTS = int(os.environ.get("BEONYEOK_RATE_LIMIT", "30"))
RATE_LIMIT_WINDOW = 60
_rate_buckets: dict = defaultdict(list)
_rate_check_counter = 0


def get_rate_limit_key(request: Request) -> str:
    token = extract_bearer_token(request.headers.get("authorization"))
    if token:
        return f"token:{token}"
    return request.client.host if request.client else "unknown"


def rate_limit_check(key: str) -> bool:
    now = time.time()
    cutoff = now - RATE_LIMIT_WINDOW
    _rate_buckets[key] = [t for t in _rate_buckets[key] if t > cutoff]
    if len(_rate_buckets[key]) >= RATE_LIMIT_REQUESTS:
        return False
    _rate_buckets[key].append(now)
    return True


def rate_limit_cleanup():
    global _rate_check_counter
    _rate_check_counter += 1
    if _rate_check_counter % 100 == 0:
        now = time.time()
        cutoff = now - RATE_LIMIT_WINDOW
        stale = [key for key, ts in _rate_buckets.items() if not ts or ts[-1] < cutoff]
        for key in stale:
            del _rate_buckets[key]


def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency guarding the endpoints that call the LLM."""
    rate_limit_cleanup()
    if not rate_limit_check(get_rate_limit_key(request)):
        raise HTTPException(429, "요청이 너무 많습니다. 잠시 후 다시 시도해주세요.")


# --- SQLite User DB ---
DB_PATH = Path(os.environ.get("BEONYEOK_DB_PATH", str(Path(__file__).parent / "beonyeok.db")))


def get_db() -> sqlite3.Connection:
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_user_db():
    conn = get_db()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            created_at REAL NOT NULL
        );
        CREATE TABLE IF NOT EXISTS sessions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            token TEXT UNIQUE NOT NULL,
            created_at REAL NOT NULL,
            expires_at REAL NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id)
        );
        CREATE TABLE IF NOT EXISTS translation_records (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            problem_type TEXT NOT NULL,
            original_text TEXT NOT NULL,
            user_translation TEXT NOT NULL,
            ai_translation TEXT NOT NULL DEFAULT '',
            feedback TEXT NOT NULL,
            score INTEGER,
            topic TEXT NOT NULL DEFAULT '',
            difficulty TEXT NOT NULL DEFAULT '',
            created_at REAL NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id)
        );
        CREATE INDEX IF NOT EXISTS idx_records_user_created
            ON translation_records (user_id, created_at);
    """)
    conn.close()
    logger.info("User database ready", extra={"component": "auth", "detail": str(DB_PATH)})


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, stored: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), stored.encode())
    except ValueError:
        return False


def create_session(user_id: int) -> str:
    token = secrets.token_hex(32)
    now = time.time()
    conn = get_db()
    conn.execute("INSERT INTO sessions (user_id, token, created_at, expires_at) VALUES (?, ?, ?, ?)",
                 (user_id, token, now, now + SESSION_TTL))
    conn.commit()
    conn.close()
    return token


def get_user_from_token(token: Optional[str]) -> Optional[dict]:
    if not token:
        return None
    conn = get_db()
    row = conn.execute(
        "SELECT s.user_id, u.username FROM sessions s JOIN users u ON s.user_id = u.id WHERE s.token = ? AND s.expires_at > ?",
        (token, time.time())
    ).fetchone()
    conn.close()
    if row:
        return {"id": row["user_id"], "username": row["username"]}
    return None


def delete_session(token: str) -> None:
    conn = get_db()
    conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
    conn.commit()
    conn.close()


def cleanup_expired_sessions() -> int:
    """Delete expired sessions from the database. Returns count of deleted rows."""
    conn = get_db()
    cursor = conn.execute("DELETE FROM sessions WHERE expires_at <= ?", (time.time(),))
    deleted = cursor.rowcount
    conn.commit()
    conn.close()
    return deleted


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    if authorization.startswith("Bearer "):
        return authorization[7:]
    return None


async def require_user(authorization: Optional[str] = Header(default=None)) -> dict:
    """FastAPI dependency resolving the bearer token to a user, or 401."""
    user = get_user_from_token(extract_bearer_token(authorization))
    if not user:
        raise HTTPException(401, "Not logged in")
    return user


async def optional_user(authorization: Optional[str] = Header(default=None)) -> Optional[dict]:
    return get_user_from_token(extract_bearer_token(authorization))
