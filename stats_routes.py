"""Study dashboard endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends

from log import get_logger
from models import InsightRequest
from auth import get_db, optional_user, enforce_rate_limit
from records_routes import load_records
from study_stats import compute_stats, demo_stats
from prompts import build_insight_prompt
from llm import get_llm, LLMCall, AllProvidersFailedError

logger = get_logger("beonyeok.stats")

router = APIRouter(prefix="/api/stats", tags=["Stats"])

INSIGHT_FAILURE_MESSAGE = "상세 인사이트를 생성하는 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."


def _stats_for(user: Optional[dict]) -> dict:
    if not user:
        return demo_stats()
    conn = get_db()
    try:
        records = load_records(conn, user["id"])
    finally:
        conn.close()
    return compute_stats(records)


@router.get("/study", summary="Dashboard statistics for the current user")
async def get_study_stats(user: Optional[dict] = Depends(optional_user)):
    return _stats_for(user)


@router.post("/insight", summary="Personalised study advice from the LLM")
async def get_insight(
    req: InsightRequest,
    user: Optional[dict] = Depends(optional_user),
    llm_call: LLMCall = Depends(get_llm),
    _rl=Depends(enforce_rate_limit),
):
    stats = _stats_for(user)
    insight = req.insight or stats["insights"][0]
    try:
        text = await llm_call(build_insight_prompt(stats, insight))
    except AllProvidersFailedError:
        logger.warning("Insight generation failed", extra={"component": "stats"})
        return {"insight": insight, "detail": INSIGHT_FAILURE_MESSAGE, "ok": False}
    return {"insight": insight, "detail": text.strip(), "ok": True}
