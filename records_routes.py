"""Per-user translation history, backed by the translation_records table."""
import time
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from log import get_logger
from models import TranslationRecordPayload, DeleteRecordsRequest, MAX_FEEDBACK_LEN
from auth import get_db, require_user
from feedback_parser import score_from_feedback

logger = get_logger("beonyeok.records")

router = APIRouter()

_RECORD_COLUMNS = (
    "id, problem_type, original_text, user_translation, ai_translation, "
    "feedback, score, topic, difficulty, created_at"
)


def load_records(conn, user_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        f"SELECT {_RECORD_COLUMNS} FROM translation_records WHERE user_id = ? ORDER BY created_at DESC, id DESC",
        (user_id,),
    ).fetchall()
    return [dict(row) for row in rows]


@router.post("/api/records", tags=["History"], summary="Save a translation record")
async def save_record(req: TranslationRecordPayload, user: dict = Depends(require_user)):
    if not req.user_translation.strip() or not req.feedback.strip():
        raise HTTPException(400, "번역과 피드백이 있어야 저장할 수 있습니다.")
    if len(req.feedback) > MAX_FEEDBACK_LEN:
        raise HTTPException(400, "Feedback too long")

    score = req.score if req.score is not None else score_from_feedback(req.feedback)
    conn = get_db()
    try:
        cursor = conn.execute(
            "INSERT INTO translation_records (user_id, problem_type, original_text, user_translation, "
            "ai_translation, feedback, score, topic, difficulty, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (user["id"], req.problem_type, req.original_text, req.user_translation, req.ai_translation,
             req.feedback, score, req.topic, req.difficulty, time.time()),
        )
        conn.commit()
        record_id = cursor.lastrowid
    finally:
        conn.close()
    logger.info("Record saved", extra={"component": "records", "user_id": user["id"]})
    return {"ok": True, "id": record_id, "score": score}


@router.get("/api/records", tags=["History"], summary="List the current user's records, newest first")
async def list_records(user: dict = Depends(require_user)):
    conn = get_db()
    try:
        return load_records(conn, user["id"])
    finally:
        conn.close()


@router.delete("/api/records/{record_id}", tags=["History"], summary="Delete one record")
async def delete_record(record_id: int, user: dict = Depends(require_user)):
    conn = get_db()
    try:
        cursor = conn.execute(
            "DELETE FROM translation_records WHERE id = ? AND user_id = ?",
            (record_id, user["id"]),
        )
        conn.commit()
        if cursor.rowcount == 0:
            raise HTTPException(404, "Record not found")
    finally:
        conn.close()
    return {"ok": True}


@router.post("/api/records/delete", tags=["History"], summary="Delete several records at once")
async def delete_records(req: DeleteRecordsRequest, user: dict = Depends(require_user)):
    if not req.ids:
        raise HTTPException(400, "삭제할 항목을 선택해주세요.")
    placeholders = ", ".join("?" for _ in req.ids)
    conn = get_db()
    try:
        cursor = conn.execute(
            f"DELETE FROM translation_records WHERE user_id = ? AND id IN ({placeholders})",
            (user["id"], *req.ids),
        )
        conn.commit()
        deleted = cursor.rowcount
    finally:
        conn.close()
    return {"ok": True, "deleted": deleted}
