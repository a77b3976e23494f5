"""Deterministic romanization for example sentences."""
import re
from typing import Optional

from pypinyin import pinyin, Style as PinyinStyle
from korean_romanizer.romanizer import Romanizer

_HANZI = re.compile(r"[一-鿿]")
_HANGUL = re.compile(r"[가-힯]")


def detect_script(text: str) -> Optional[str]:
    if _HANZI.search(text or ""):
        return "zh"
    if _HANGUL.search(text or ""):
        return "ko"
    return None


def deterministic_pronunciation(text: str, lang_code: str) -> Optional[str]:
    if lang_code == "zh":
        result = pinyin(text, style=PinyinStyle.TONE)
        return " ".join(p[0] for p in result)
    elif lang_code == "ko":
        r = Romanizer(text)
        return r.romanize()
    return None


def romanize(text: str) -> Optional[str]:
    """Pinyin for Chinese text, Revised Romanization for Korean, else None."""
    lang_code = detect_script(text)
    if lang_code is None:
        return None
    return deterministic_pronunciation(text.strip(), lang_code)
