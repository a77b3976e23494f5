"""Grouping of the "6. 주요 표현/예문" section into example blocks.

The model returns the example section as flat bullet lines:

    ‧ 중요 표현: 경제 회복 → 经济复苏(jīng jì fù sū)
    ‧ 원문 예문 1: 정부는 경제 회복을 최우선 과제로 삼고 있다.
    ‧ 예문 번역 1: 政府将经济复苏作为首要任务。

Each line is tagged by a classifier pinned to that marker vocabulary, then
an expression line opens a group that collects the example pairs after it.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

from models import BULLET
from pronunciation import romanize
from speech import choose_speech_lang

EXPRESSION_MARKER = "중요 표현"
ORIGINAL_MARKER = "원문 예문"
TRANSLATION_MARKER = "예문 번역"
EXPRESSION_SEPARATORS = (":", "：", "→")

EXPRESSION = "expression"
ORIGINAL = "original"
TRANSLATION = "translation"
GENERAL = "general"
SPACER = "spacer"
PARAGRAPH = "paragraph"

_BULLET_PREFIX = re.compile(r"^%s\s*" % BULLET)
_COLON = re.compile(r"[:：]")


@dataclass(frozen=True)
class TaggedLine:
    kind: str
    content: str
    index: int


def classify_line(line: str, index: int) -> TaggedLine:
    stripped = line.strip()
    if not stripped:
        return TaggedLine(SPACER, "", index)
    if not stripped.startswith(BULLET):
        return TaggedLine(PARAGRAPH, line, index)

    content = _BULLET_PREFIX.sub("", stripped).strip()
    if EXPRESSION_MARKER in content and any(sep in content for sep in EXPRESSION_SEPARATORS):
        kind = EXPRESSION
    elif ORIGINAL_MARKER in content:
        kind = ORIGINAL
    elif TRANSLATION_MARKER in content:
        kind = TRANSLATION
    else:
        kind = GENERAL
    return TaggedLine(kind, content, index)


def split_translation(content: str):
    """Split "예문 번역 1: 政府..." at the first colon into (label, spoken text)."""
    match = _COLON.search(content)
    if match is None:
        return "", content.strip()
    return content[:match.end()], content[match.end():].strip()


@dataclass
class ExampleItem:
    kind: str
    content: str
    index: int

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "content": self.content, "index": self.index}
        if self.kind == TRANSLATION:
            label, text = split_translation(self.content)
            data.update({
                "label": label,
                "text": text,
                "speech_lang": choose_speech_lang(text),
                "pronunciation": romanize(text),
            })
        return data


@dataclass
class ExampleGroup:
    number: int
    items: List[ExampleItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"number": self.number, "items": [item.to_dict() for item in self.items]}


@dataclass
class ExampleBlock:
    """One rendered unit: a group, a separator, a standalone item, a spacer or a paragraph."""
    kind: str
    index: int
    group: Optional[ExampleGroup] = None
    item: Optional[ExampleItem] = None
    text: str = ""

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "index": self.index}
        if self.group is not None:
            data["group"] = self.group.to_dict()
        if self.item is not None:
            data["item"] = self.item.to_dict()
        if self.text:
            data["text"] = self.text
        return data


def group_example_lines(text: str) -> List[ExampleBlock]:
    """Build the ordered block list for the example section.

    An expression line opens a group that collects the original and
    translation lines after it. The group is emitted when the next
    expression line arrives or the input ends, so general items, spacers
    and paragraphs met while it is open come out ahead of it. Groups are
    numbered from 1 and every group after the first is preceded by a
    separator labelled "예문 N". Original and translation lines with no
    open group are standalone items.
    """
    blocks: List[ExampleBlock] = []
    current: Optional[ExampleGroup] = None

    def close_group():
        if current is None:
            return
        opened_at = current.items[0].index
        if current.number > 1:
            blocks.append(ExampleBlock("separator", opened_at, text=f"예문 {current.number}"))
        blocks.append(ExampleBlock("group", opened_at, group=current))

    for tagged in (classify_line(line, idx) for idx, line in enumerate(text.split("\n"))):
        item = ExampleItem(tagged.kind, tagged.content, tagged.index)
        if tagged.kind == EXPRESSION:
            close_group()
            current = ExampleGroup(current.number + 1 if current else 1, [item])
        elif tagged.kind in (ORIGINAL, TRANSLATION) and current is not None:
            current.items.append(item)
        elif tagged.kind == SPACER:
            blocks.append(ExampleBlock(SPACER, tagged.index))
        elif tagged.kind == PARAGRAPH:
            blocks.append(ExampleBlock(PARAGRAPH, tagged.index, text=tagged.content))
        else:
            blocks.append(ExampleBlock("item", tagged.index, item=item))
    close_group()
    return blocks


def example_groups(blocks: List[ExampleBlock]) -> List[ExampleGroup]:
    return [block.group for block in blocks if block.group is not None]
