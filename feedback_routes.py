"""Feedback endpoints: request LLM feedback, render it, and voice example sentences."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from log import get_logger
from models import (
    LANGUAGE_PAIRS, MAX_INPUT_LEN, MAX_FEEDBACK_LEN,
    FeedbackRequest, FeedbackViewRequest, SpeechRequest,
)
from auth import enforce_rate_limit
from llm import get_llm, LLMCall, AllProvidersFailedError
from prompts import build_feedback_prompt
from feedback_view import build_feedback_view
from highlight import HighlightState, ViewState
from problems import get_problem, problem_vocab, find_vocab
from speech import HttpSpeechSynthesizer, SpeechUnavailableError, get_synthesizer, request_speech

logger = get_logger("beonyeok.feedback_routes")

router = APIRouter(tags=["Feedback"])


@router.post("/api/feedback", summary="Ask the LLM for six-section feedback on a translation")
async def request_feedback(
    req: FeedbackRequest,
    llm_call: LLMCall = Depends(get_llm),
    _rl=Depends(enforce_rate_limit),
):
    if not req.original_text.strip():
        raise HTTPException(400, "문제가 없습니다.")
    if not req.user_translation.strip():
        raise HTTPException(400, "번역문을 입력해주세요.")
    for value in (req.original_text, req.user_translation, req.ai_translation):
        if len(value) > MAX_INPUT_LEN:
            raise HTTPException(400, f"Input too long (max {MAX_INPUT_LEN} characters)")
    if req.language_pair not in LANGUAGE_PAIRS:
        raise HTTPException(400, f"Unsupported language pair. Allowed: {', '.join(LANGUAGE_PAIRS)}")

    prompt = build_feedback_prompt(
        req.source_language, req.language_pair, req.original_text,
        req.user_translation, req.ai_translation,
    )
    try:
        feedback = await llm_call(prompt)
    except AllProvidersFailedError:
        logger.warning("Feedback request failed", extra={"component": "feedback", "status_code": 502})
        raise HTTPException(502, "피드백 요청에 실패했습니다.")

    view = build_feedback_view(
        feedback,
        ViewState(),
        original_text=req.original_text,
        ai_translation=req.ai_translation,
        user_translation=req.user_translation,
    )
    return {"feedback": feedback, "view": view}


@router.post("/api/feedback/view", summary="Render feedback text with the current highlight")
async def render_feedback(req: FeedbackViewRequest):
    if len(req.feedback) > MAX_FEEDBACK_LEN:
        raise HTTPException(400, "Feedback too long")
    vocab = []
    if req.problem_id:
        problem = get_problem(req.problem_id)
        if not problem:
            raise HTTPException(404, "문제가 없습니다.")
        vocab = problem_vocab(problem)

    view = ViewState(highlight=HighlightState(active=req.active_phrase), show_hints=req.show_hints)
    if req.vocab_word:
        view.toggle_vocab(find_vocab(vocab, req.vocab_word) or {"korean": req.vocab_word})
    else:
        view.selected_vocab = find_vocab(vocab, view.active_phrase)

    return build_feedback_view(
        req.feedback,
        view,
        original_text=req.original_text,
        ai_translation=req.ai_translation,
        user_translation=req.user_translation,
        vocab=vocab,
    )


@router.post("/api/speech", summary="Synthesize a translated example sentence")
async def speak(
    req: SpeechRequest,
    synthesizer: Optional[HttpSpeechSynthesizer] = Depends(get_synthesizer),
):
    text = req.text.strip()
    if not text:
        raise HTTPException(400, "Text cannot be empty")
    if len(text) > MAX_INPUT_LEN:
        raise HTTPException(400, f"Input too long (max {MAX_INPUT_LEN} characters)")
    try:
        return await request_speech(text, synthesizer)
    except SpeechUnavailableError as e:
        raise HTTPException(503, e.notice)
