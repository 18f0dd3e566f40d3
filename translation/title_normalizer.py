"""Canonical title extraction from multi-candidate translation output.

Translation models asked for "one title" regularly answer with a menu:
an intro sentence, a bullet list of variants, bold labels, blockquotes or
``---`` separated sections. ``TitleNormalizer`` runs an ordered list of
extraction rules over that text and keeps the first non-empty answer.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, NamedTuple, Optional, Sequence


logger = logging.getLogger(__name__)


_LIST_ITEM_RE = re.compile(r"^[ \t]*[-*•][ \t]+(\S.*)$", flags=re.MULTILINE)
_QUOTE_LINE_RE = re.compile(r"^[ \t]*>[ \t]*(\S.*)$", flags=re.MULTILINE)
_SEPARATOR_RE = re.compile(r"\s*-{3,}\s*")
_EMPHASIS = "**"

_EXPLANATORY_PHRASES = (
    "以下是",
    "翻译方式",
    "几种",
    "版本",
    "here are",
    "here is",
    "options",
    "alternatives",
    "possible translations",
)
_EXPLANATION_KEYWORDS = ("说明", "解释", "explanation")
_COMMENTARY_WORDS = ("translation", "following", "翻译", "以下")
_COLONS = (":", "：")
_QUOTE_PAIRS = {'"': '"', "'": "'", "“": "”", "‘": "’", "「": "」"}

_MIN_SEGMENT_LINE = 5
_MIN_PLAIN_LINE = 6
_MAX_PLAIN_LINE = 99


def _strip_emphasis(value: str) -> str:
    return value.replace(_EMPHASIS, "").strip()


def _strip_wrapping_quotes(value: str) -> str:
    text = value.strip()
    if len(text) >= 2 and _QUOTE_PAIRS.get(text[0]) == text[-1]:
        return text[1:-1].strip()
    return text


def has_explanatory_marker(text: str) -> bool:
    """Whether the text looks like commentary around one or more candidates."""
    if _EMPHASIS in text:
        return True
    if _LIST_ITEM_RE.search(text) or _QUOTE_LINE_RE.search(text):
        return True
    lowered = text.lower()
    return any(phrase in lowered for phrase in _EXPLANATORY_PHRASES)


def first_list_item(text: str) -> Optional[str]:
    match = _LIST_ITEM_RE.search(text)
    if not match:
        return None
    return _strip_emphasis(match.group(1))


def first_quoted_line(text: str) -> Optional[str]:
    match = _QUOTE_LINE_RE.search(text)
    if not match:
        return None
    return _strip_emphasis(match.group(1))


def _is_segment_candidate(line: str) -> bool:
    if not line or len(line) <= _MIN_SEGMENT_LINE:
        return False
    if _EMPHASIS in line or line.startswith("#"):
        return False
    if any(colon in line for colon in _COLONS):
        return False
    lowered = line.lower()
    return not any(keyword in lowered for keyword in _EXPLANATION_KEYWORDS)


def first_line_after_separator(text: str) -> Optional[str]:
    segments = _SEPARATOR_RE.split(text)
    for segment in segments[1:]:
        for raw_line in segment.split("\n"):
            line = raw_line.strip()
            if _is_segment_candidate(line):
                return _strip_emphasis(line.replace(">", ""))
    return None


def first_plain_line(text: str) -> Optional[str]:
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not (_MIN_PLAIN_LINE <= len(line) <= _MAX_PLAIN_LINE):
            continue
        lowered = line.lower()
        if any(word in lowered for word in _COMMENTARY_WORDS):
            continue
        return _strip_wrapping_quotes(_strip_emphasis(line))
    return None


def leading_segment(text: str) -> str:
    """Last resort: everything before the first separator, unquoted."""
    head = _SEPARATOR_RE.split(text, maxsplit=1)[0]
    return _strip_wrapping_quotes(head)


class TitleRule(NamedTuple):
    """One extraction step; ``marker_only`` rules run only on commentary-laden text."""

    name: str
    extract: Callable[[str], Optional[str]]
    marker_only: bool = False


DEFAULT_RULES: Sequence[TitleRule] = (
    TitleRule("list_item", first_list_item, marker_only=True),
    TitleRule("quoted_line", first_quoted_line, marker_only=True),
    TitleRule("after_separator", first_line_after_separator, marker_only=True),
    TitleRule("plain_line", first_plain_line),
)


class TitleNormalizer:
    """Collapse raw translation output into one canonical title."""

    def __init__(self, rules: Optional[Sequence[TitleRule]] = None) -> None:
        self.rules: List[TitleRule] = list(DEFAULT_RULES if rules is None else rules)

    def normalize(self, raw: Optional[str]) -> str:
        text = str(raw or "")
        if not text.strip():
            return ""

        marked = has_explanatory_marker(text)
        for rule in self.rules:
            if rule.marker_only and not marked:
                continue
            try:
                candidate = rule.extract(text)
            except Exception as exc:  # a broken rule must not break the chain
                logger.debug("title rule %s failed: %s", rule.name, exc)
                continue
            if candidate:
                return candidate

        return leading_segment(text) or text.strip()

    __call__ = normalize


_default_normalizer = TitleNormalizer()


def normalize_title(raw: Optional[str]) -> str:
    """Module-level shortcut using the default rule chain."""
    return _default_normalizer.normalize(raw)
