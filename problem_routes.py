"""Problem bank, AI-generated problems, and AI reference translations."""
import time

from fastapi import APIRouter, Depends, HTTPException

from log import get_logger
from models import (
    ALL_FILTER, DIFFICULTIES, LANGUAGE_PAIRS, MAX_INPUT_LEN,
    GenerateProblemRequest, TranslateRequest,
)
from auth import enforce_rate_limit
from cache import translation_key, cache_get, cache_put
from llm import get_llm, LLMCall, AllProvidersFailedError, parse_json_object
from prompts import build_problem_prompt, build_translation_prompt
from problems import (
    load_problems, filter_problems, available_domains, get_problem,
    source_text, reference_translation, problem_vocab,
)

logger = get_logger("beonyeok.problem_routes")

router = APIRouter(tags=["Problems"])


def _check_language_pair(pair: str):
    if pair not in LANGUAGE_PAIRS:
        raise HTTPException(400, f"Unsupported language pair. Allowed: {', '.join(LANGUAGE_PAIRS)}")


@router.get("/api/problems", summary="List existing problems with filters")
async def list_problems(difficulty: str = ALL_FILTER, domain: str = ALL_FILTER):
    problems = load_problems()
    return {
        "problems": filter_problems(problems, difficulty, domain),
        "domains": available_domains(problems),
        "difficulties": [ALL_FILTER, *DIFFICULTIES],
        "language_pairs": list(LANGUAGE_PAIRS),
    }


@router.get("/api/problems/{problem_id}", summary="Get one existing problem, oriented to a language pair")
async def read_problem(problem_id: str, language_pair: str = "한-중"):
    _check_language_pair(language_pair)
    problem = get_problem(problem_id)
    if not problem:
        raise HTTPException(404, "문제가 없습니다.")
    return {
        **problem,
        "language_pair": language_pair,
        "source_text": source_text(problem, language_pair),
        "reference_translation": reference_translation(problem, language_pair),
        "vocab": problem_vocab(problem),
    }


@router.post("/api/problems/generate", summary="Generate a new problem with the LLM")
async def generate_problem(
    req: GenerateProblemRequest,
    llm_call: LLMCall = Depends(get_llm),
    _rl=Depends(enforce_rate_limit),
):
    if not req.topic.strip():
        raise HTTPException(400, "주제를 입력해주세요.")
    if len(req.topic) > MAX_INPUT_LEN:
        raise HTTPException(400, f"Input too long (max {MAX_INPUT_LEN} characters)")
    _check_language_pair(req.language_pair)

    try:
        text = await llm_call(build_problem_prompt(req.topic.strip(), req.difficulty or "", req.language_pair))
    except AllProvidersFailedError as e:
        raise HTTPException(502, f"문제 생성에 실패했습니다: {e}")

    problem = parse_json_object(text)
    if not problem:
        logger.warning("Generated problem had no JSON object", extra={"component": "problems"})
        raise HTTPException(502, "AI가 올바른 형식으로 문제를 생성하지 못했습니다.")

    problem = {"id": f"generated-{int(time.time() * 1000)}", **problem}
    problem["language_pair"] = req.language_pair
    return problem


@router.post("/api/translate", summary="AI reference translation of a source text")
async def translate(
    req: TranslateRequest,
    llm_call: LLMCall = Depends(get_llm),
    _rl=Depends(enforce_rate_limit),
):
    if not req.text.strip():
        raise HTTPException(400, "Text cannot be empty")
    if len(req.text) > MAX_INPUT_LEN:
        raise HTTPException(400, f"Input too long (max {MAX_INPUT_LEN} characters)")
    _check_language_pair(req.language_pair)

    key = translation_key(req.text, req.language_pair)
    cached = cache_get(key)
    if cached is not None:
        return {"translation": cached, "cached": True}

    try:
        text = await llm_call(build_translation_prompt(req.text.strip(), req.language_pair))
    except AllProvidersFailedError:
        raise HTTPException(502, "AI 번역 생성에 실패했습니다.")

    translation = text.strip()
    cache_put(key, translation)
    return {"translation": translation, "cached": False}
