"""LLM access: an ordered chain of provider strategies with sequential fallback.

Each provider wraps one model behind `complete(prompt) -> str` and reports
any failure as LLMProviderError. `call_with_fallback` walks the chain in
order and returns the first answer; providers can be added, removed or
reordered by changing the model list alone.
"""
import os
import json
import re as _re
from typing import Callable, Awaitable, List, Optional, Sequence

import httpx

from log import get_logger, timed

logger = get_logger("beonyeok.llm")

# --- Config ---
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models"
OPENAI_URL = "https://api.openai.com/v1/chat/completions"
LLM_TIMEOUT = float(os.environ.get("BEONYEOK_LLM_TIMEOUT", "60"))

DEFAULT_MODELS = [
    "gemini-2.5-flash-lite",
    "gemini-1.5-flash",
    "gemini-2.0-flash",
    "gpt-4o-mini",
    "gpt-3.5-turbo-0125",
    "gpt-4.1-mini",
]
MODEL_ORDER = [
    m.strip() for m in os.environ.get("BEONYEOK_MODELS", "").split(",") if m.strip()
] or DEFAULT_MODELS

ALL_FAILED_MESSAGE = "모든 AI 모델 호출 실패"


class LLMProviderError(Exception):
    """A single provider failed to produce an answer."""

    def __init__(self, model: str, message: str):
        super().__init__(f"{model}: {message}")
        self.model = model


class AllProvidersFailedError(Exception):
    """Every provider in the chain failed."""

    def __init__(self, errors: Sequence[LLMProviderError] = ()):
        super().__init__(ALL_FAILED_MESSAGE)
        self.errors = list(errors)


class LLMProvider:
    """Base strategy: one model, one `complete` call."""

    def __init__(self, model: str, api_key: str, timeout: float = LLM_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def request(self, prompt: str) -> dict:
        raise NotImplementedError

    def parse(self, data: dict) -> str:
        raise NotImplementedError

    async def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise LLMProviderError(self.model, "API key not configured")
        kwargs = self.request(prompt)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(**kwargs)
        except httpx.HTTPError as e:
            raise LLMProviderError(self.model, f"request failed: {e}") from e
        if resp.status_code != 200:
            raise LLMProviderError(self.model, f"HTTP {resp.status_code}: {resp.text[:200]}")
        try:
            text = self.parse(resp.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMProviderError(self.model, f"unexpected response shape: {e}") from e
        if not isinstance(text, str):
            raise LLMProviderError(self.model, "response content is not text")
        return text


class GeminiProvider(LLMProvider):

    def request(self, prompt: str) -> dict:
        return {
            "url": f"{GEMINI_URL}/{self.model}:generateContent",
            "params": {"key": self.api_key},
            "json": {"contents": [{"parts": [{"text": prompt}]}]},
        }

    def parse(self, data: dict) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]


class OpenAIProvider(LLMProvider):

    def request(self, prompt: str) -> dict:
        return {
            "url": OPENAI_URL,
            "headers": {"Authorization": f"Bearer {self.api_key}"},
            "json": {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": 1000,
                "temperature": 0.7,
            },
        }

    def parse(self, data: dict) -> str:
        return data["choices"][0]["message"]["content"]


def build_provider(model: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> LLMProvider:
    if model.startswith("gemini"):
        return GeminiProvider(model, GEMINI_API_KEY, transport=transport)
    return OpenAIProvider(model, OPENAI_API_KEY, transport=transport)


def build_provider_chain(models: Optional[Sequence[str]] = None,
                         transport: Optional[httpx.AsyncBaseTransport] = None) -> List[LLMProvider]:
    return [build_provider(m, transport=transport) for m in (models or MODEL_ORDER)]


async def call_with_fallback(prompt: str, providers: Optional[Sequence[LLMProvider]] = None) -> str:
    """Try each provider in order and return the first answer."""
    chain = list(providers) if providers is not None else build_provider_chain()
    errors = []
    for provider in chain:
        try:
            with timed() as elapsed:
                text = await provider.complete(prompt)
        except LLMProviderError as e:
            logger.warning("LLM provider failed", extra={"component": "llm", "model": provider.model,
                                                         "detail": str(e)})
            errors.append(e)
            continue
        logger.info("LLM answered", extra={
            "component": "llm", "model": provider.model,
            "duration_ms": elapsed["duration_ms"],
        })
        return text
    logger.error("All LLM providers failed", extra={"component": "llm", "count": len(errors)})
    raise AllProvidersFailedError(errors)


LLMCall = Callable[[str], Awaitable[str]]


def get_llm() -> LLMCall:
    """FastAPI dependency returning the prompt -> text callable."""
    return call_with_fallback


def configured_models() -> List[dict]:
    return [
        {"model": p.model, "configured": bool(p.api_key)}
        for p in build_provider_chain()
    ]


# --- Helpers ---

def parse_json_object(text: str) -> Optional[dict]:
    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except json.JSONDecodeError:
        match = _re.search(r'\{.*\}', text, _re.DOTALL)
        if not match:
            return None
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            return None
