"""Pydantic schemas and constants for the translation coach."""
from typing import Optional, List, Literal
from pydantic import BaseModel, Field

# --- Constants ---
SECTION_KEYS = ("summary", "good", "bad", "recommend", "learn", "example")

# Heading text shown above each section, in section order
SECTION_TITLES = {
    "summary": "종합 평가",
    "good": "좋은 점/분석",
    "bad": "아쉬운 점",
    "recommend": "추천 표현/개선",
    "learn": "학습 제안",
    "example": "주요 표현/예문",
}

# Headings the model tends to repeat at the top of a section body.
# Longer variants first so "좋은 점/분석" is not cut down to "/분석".
SECTION_HEADINGS = {
    "summary": ["종합 평가"],
    "good": ["좋은 점/분석", "좋은 점"],
    "bad": ["아쉬운 점"],
    "recommend": ["추천 표현/개선", "추천 표현"],
    "learn": ["학습 제안"],
    "example": ["주요 표현/예문", "주요 표현"],
}

BULLET = "‧"  # ‧

LANGUAGE_PAIRS = {
    "한-중": ("한국어", "중국어"),
    "중-한": ("중국어", "한국어"),
}

ALL_FILTER = "전체"
DIFFICULTIES = ["상", "중", "하"]
DEFAULT_GENERATED_DIFFICULTY = "중급"

PROBLEM_TYPES = {
    "existing": "기존 문제",
    "ai-generated": "AI 생성 문제",
}

MAX_INPUT_LEN = 2000
MAX_FEEDBACK_LEN = 20000


# --- Pydantic Models ---

class AuthRequest(BaseModel):
    username: str
    password: str


class FeedbackRequest(BaseModel):
    original_text: str
    user_translation: str
    ai_translation: str = ""
    source_language: str = "한국어"
    language_pair: str = "한-중"


class FeedbackViewRequest(BaseModel):
    feedback: str
    original_text: str = ""
    ai_translation: str = ""
    user_translation: str = ""
    active_phrase: Optional[str] = None
    problem_id: Optional[str] = None
    show_hints: bool = False
    vocab_word: Optional[str] = None  # hint chip clicked in this request


class SpeechRequest(BaseModel):
    text: str


class GenerateProblemRequest(BaseModel):
    topic: str
    difficulty: Optional[str] = None
    language_pair: str = "한-중"


class TranslateRequest(BaseModel):
    text: str
    language_pair: str = "한-중"


class TranslationRecordPayload(BaseModel):
    problem_type: Literal["existing", "ai-generated"]
    original_text: str
    user_translation: str
    ai_translation: str = ""
    feedback: str
    score: Optional[int] = None
    topic: str = ""
    difficulty: str = ""


class DeleteRecordsRequest(BaseModel):
    ids: List[int] = Field(default_factory=list)


class InsightRequest(BaseModel):
    insight: str = ""
