"""LRU caches for parsed feedback and AI reference translations.

Parsed feedback is a pure function of the raw model text, so it is memoized
on a hash of that text. Reference translations expire after a day.
"""
import time
import hashlib
from collections import OrderedDict

from log import get_logger

logger = get_logger("beonyeok.cache")

# --- Parsed feedback memo ---
PARSED_CACHE_MAX = 256
_parsed_cache: OrderedDict = OrderedDict()

# --- Translation Cache ---
CACHE_MAX = 500
CACHE_TTL = 3600 * 24  # 24h
_translation_cache: OrderedDict = OrderedDict()


def text_key(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()


def parsed_get(key: str):
    result = _parsed_cache.get(key)
    if result is not None:
        _parsed_cache.move_to_end(key)
    return result


def parsed_put(key: str, result) -> None:
    _parsed_cache[key] = result
    _parsed_cache.move_to_end(key)
    if len(_parsed_cache) > PARSED_CACHE_MAX:
        _parsed_cache.popitem(last=False)


def translation_key(text: str, language_pair: str) -> str:
    raw = f"{text.strip()}|{language_pair}"
    return hashlib.sha256(raw.encode()).hexdigest()


def cache_get(key: str):
    entry = _translation_cache.get(key)
    if entry is None:
        return None
    ts, result = entry
    if time.time() - ts > CACHE_TTL:
        _translation_cache.pop(key, None)
        return None
    _translation_cache.move_to_end(key)
    return result


def cache_put(key: str, result) -> None:
    _translation_cache[key] = (time.time(), result)
    _translation_cache.move_to_end(key)
    if len(_translation_cache) > CACHE_MAX:
        _translation_cache.popitem(last=False)


def cache_stats() -> dict:
    return {
        "parsed_entries": len(_parsed_cache),
        "parsed_max": PARSED_CACHE_MAX,
        "translation_entries": len(_translation_cache),
        "translation_max": CACHE_MAX,
        "ttl_hours": CACHE_TTL / 3600,
    }


def clear_caches() -> None:
    _parsed_cache.clear()
    _translation_cache.clear()
    logger.info("Caches cleared", extra={"component": "cache"})
