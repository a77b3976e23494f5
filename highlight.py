"""Cross-panel phrase highlighting.

One phrase at a time may be active. Hovering a quoted phrase in the feedback
activates it, leaving clears it, and every panel that contains the phrase
marks each occurrence.
"""
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

IDLE = "idle"
ACTIVE = "active"

PANELS = ("original", "ai_translation", "user_translation")


class HighlightState:
    """Idle / Active(phrase) state with a change callback.

    The callback receives the new phrase, or None when highlighting is cleared.
    """

    def __init__(self, on_change: Optional[Callable[[Optional[str]], None]] = None,
                 active: Optional[str] = None):
        self.on_change = on_change
        self.active = active or None

    @property
    def state(self) -> str:
        return ACTIVE if self.active else IDLE

    def hover_enter(self, phrase: str) -> None:
        if not phrase or phrase == self.active:
            return
        self.active = phrase
        if self.on_change:
            self.on_change(phrase)

    def hover_leave(self) -> None:
        if self.active is None:
            return
        self.active = None
        if self.on_change:
            self.on_change(None)

    def is_highlighted(self, phrase: str) -> bool:
        return self.active is not None and phrase == self.active


@dataclass
class ViewState:
    """Per-view UI state passed explicitly to the render functions.

    The vocabulary-hint panel shares the highlight with the feedback quotes:
    picking a hint word highlights it everywhere, picking it again clears it.
    """
    highlight: HighlightState = field(default_factory=HighlightState)
    show_hints: bool = False
    selected_vocab: Optional[dict] = None

    @property
    def active_phrase(self) -> Optional[str]:
        return self.highlight.active

    def toggle_vocab(self, vocab: dict) -> None:
        word = vocab.get("korean")
        if not word:
            return
        if self.highlight.is_highlighted(word):
            self.highlight.hover_leave()
            self.selected_vocab = None
        else:
            self.highlight.hover_enter(word)
            self.selected_vocab = vocab


def mark_text(text: str, phrase: Optional[str]) -> List[dict]:
    """Split `text` into runs, flagging every exact occurrence of `phrase`."""
    if not text:
        return []
    if not phrase:
        return [{"text": text, "highlighted": False}]
    pattern = re.compile("(%s)" % re.escape(phrase))
    return [
        {"text": part, "highlighted": part == phrase}
        for part in pattern.split(text)
        if part
    ]


def mark_panels(view: ViewState, original: str, ai_translation: str, user_translation: str) -> Dict[str, dict]:
    phrase = view.active_phrase
    panels = {}
    for name, text in zip(PANELS, (original, ai_translation, user_translation)):
        runs = mark_text(text or "", phrase)
        panels[name] = {
            "runs": runs,
            "highlighted": any(run["highlighted"] for run in runs),
        }
    return panels
