import re
from dataclasses import dataclass

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class TextCounts:
    word_count: int
    character_count: int


def strip_markup(content: str | None) -> str:
    """Plain text of rich-text markup: tags become spaces, whitespace runs collapse."""
    if not content:
        return ""
    text = _TAG_PATTERN.sub(" ", content)
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def compute_counts(content: str | None) -> TextCounts:
    text = strip_markup(content)
    if not text:
        return TextCounts(word_count=0, character_count=0)
    return TextCounts(word_count=len(text.split(" ")), character_count=len(text))


def word_count(content: str | None) -> int:
    return compute_counts(content).word_count
