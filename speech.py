"""Text-to-speech requests for translated example sentences.

The voice is picked by a rough heuristic kept from the first version of the
app: text with no CJK ideographs gets the target-language tag, anything
else the other one. Pinyin-only or punctuation-only fragments are therefore
voiced as Chinese; this is known and deliberately left as is.
"""
import base64
import os
import re
from typing import Optional

import httpx

from log import get_logger

logger = get_logger("beonyeok.speech")

# --- Config ---
TTS_URL = os.environ.get("BEONYEOK_TTS_URL", "")
TTS_TIMEOUT = float(os.environ.get("BEONYEOK_TTS_TIMEOUT", "15"))
SPEECH_RATE = 0.8

TARGET_SPEECH_LANG = "zh-CN"
OTHER_SPEECH_LANG = "ko-KR"

SPEECH_UNAVAILABLE_NOTICE = "이 환경은 음성 합성을 지원하지 않습니다."

_IDEOGRAPH = re.compile(r"[一-龯]")


class SpeechUnavailableError(Exception):
    """No speech synthesis capability is available."""

    def __init__(self, message: str = SPEECH_UNAVAILABLE_NOTICE):
        super().__init__(message)
        self.notice = message


def choose_speech_lang(text: str) -> str:
    if _IDEOGRAPH.search(text) is None:
        return TARGET_SPEECH_LANG
    return OTHER_SPEECH_LANG


class HttpSpeechSynthesizer:
    """Calls an HTTP TTS service that answers a JSON request with audio bytes."""

    def __init__(self, url: str, timeout: float = TTS_TIMEOUT, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def synthesize(self, text: str, lang: str, rate: float = SPEECH_RATE) -> bytes:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(self.url, json={"text": text, "language": lang, "speed": rate})
        if resp.status_code != 200:
            raise SpeechUnavailableError()
        return resp.content


def get_synthesizer() -> Optional[HttpSpeechSynthesizer]:
    """FastAPI dependency: the configured synthesizer, or None when speech is off."""
    if not TTS_URL:
        return None
    return HttpSpeechSynthesizer(TTS_URL)


async def request_speech(text: str, synthesizer: Optional[HttpSpeechSynthesizer]) -> dict:
    """Synthesize `text` and return it as a data URL with the chosen voice tag.

    Raises SpeechUnavailableError when no synthesizer is configured or the
    service cannot be reached.
    """
    lang = choose_speech_lang(text)
    if synthesizer is None:
        raise SpeechUnavailableError()
    try:
        audio = await synthesizer.synthesize(text, lang)
    except httpx.HTTPError as e:
        logger.warning("TTS service unreachable", extra={"component": "speech", "detail": str(e)})
        raise SpeechUnavailableError() from e
    audio_base64 = base64.b64encode(audio).decode("utf-8")
    return {
        "text": text,
        "lang": lang,
        "rate": SPEECH_RATE,
        "audio": f"data:audio/wav;base64,{audio_base64}",
    }
