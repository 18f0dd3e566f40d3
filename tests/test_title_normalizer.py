from __future__ import annotations

import pytest

from translation.title_normalizer import (
    DEFAULT_RULES,
    TitleNormalizer,
    TitleRule,
    has_explanatory_marker,
    leading_segment,
    normalize_title,
)


MULTI_CANDIDATE_BOLD = """**口语化版本**：
> 我爱我的狗

**正式版本**：
> 本人非常喜爱自己的狗
"""

SEPARATED = """**直译**：我爱我的狗

---

**意译**：
我超爱我家狗狗
"""

ENGLISH_COMMENTARY = """Here are the translations:
Translation 1
我非常喜欢我的小狗
"""


def test_list_item_after_explanation() -> None:
    assert normalize_title("以下是几种翻译方式：\n- 你好世界\n- 其他") == "你好世界"


def test_single_quote_line_without_list() -> None:
    assert normalize_title("> 你好") == "你好"


def test_plain_title_passes_through() -> None:
    assert normalize_title("Hello World") == "Hello World"


@pytest.mark.parametrize("raw", ["", None, "   \n  "])
def test_empty_input_returns_empty_string(raw) -> None:
    assert normalize_title(raw) == ""


def test_bold_labels_with_quotes_pick_first_quote() -> None:
    assert normalize_title(MULTI_CANDIDATE_BOLD) == "我爱我的狗"


def test_separator_sections_skip_labels_and_colons() -> None:
    assert normalize_title(SEPARATED) == "我超爱我家狗狗"


def test_line_scan_skips_commentary_lines() -> None:
    assert normalize_title(ENGLISH_COMMENTARY) == "我非常喜欢我的小狗"


def test_list_item_emphasis_is_stripped() -> None:
    raw = "以下是几种翻译：\n- **我爱我的狗**（直译）\n- 我超爱我家狗"
    assert normalize_title(raw) == "我爱我的狗（直译）"


def test_wrapping_quotes_are_removed() -> None:
    assert normalize_title('"我爱我的狗狗"') == "我爱我的狗狗"
    assert normalize_title("“你好”") == "你好"


def test_leading_segment_cuts_at_separator() -> None:
    assert leading_segment("你好 --- 其他说明") == "你好"
    assert leading_segment("“你好”") == "你好"


def test_result_is_never_empty_for_non_empty_input() -> None:
    for raw in ["---", "- ", ">", "**", '""']:
        assert normalize_title(raw) != ""


def test_separator_line_is_not_taken_as_list_item() -> None:
    assert normalize_title("以下是翻译\n---\n我超爱我家狗狗") == "我超爱我家狗狗"


def test_marker_detection() -> None:
    assert has_explanatory_marker("以下是几种翻译方式") is True
    assert has_explanatory_marker("**bold**") is True
    assert has_explanatory_marker("- item") is True
    assert has_explanatory_marker("> quoted") is True
    assert has_explanatory_marker("Hello World") is False
    assert has_explanatory_marker("self-hosted LLM tips") is False


CORPUS = [
    "Hello World",
    "I built a self-hosted agent in a weekend",
    "以下是几种翻译方式：\n- 你好世界\n- 其他",
    "> 你好",
    MULTI_CANDIDATE_BOLD,
    SEPARATED,
    ENGLISH_COMMENTARY,
    '"我爱我的狗狗"',
    "你好 --- 其他说明",
    "我爱我的狗",
    "以下是我的配置分享",
    "# 标题里有井号也没关系",
]


@pytest.mark.parametrize("raw", CORPUS)
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_title(raw)
    assert normalize_title(once) == once


def test_rules_are_data_driven() -> None:
    def bracketed(text: str):
        if text.startswith("[") and "]" in text:
            return text[1 : text.index("]")]
        return None

    normalizer = TitleNormalizer(rules=[TitleRule("bracketed", bracketed), *DEFAULT_RULES])
    assert normalizer.normalize("[我爱我的狗] (literal)") == "我爱我的狗"
    assert TitleNormalizer().normalize("[我爱我的狗] (literal)") == "[我爱我的狗] (literal)"


def test_broken_rule_does_not_raise() -> None:
    def explode(text: str):
        raise RuntimeError("bad rule")

    normalizer = TitleNormalizer(rules=[TitleRule("explode", explode), *DEFAULT_RULES])
    assert normalizer("Hello World") == "Hello World"


@pytest.mark.parametrize("commentary", ["这一行是解释内容", "补充说明一下用词", "see explanation below"])
def test_separator_sections_skip_explanation_lines(commentary: str) -> None:
    raw = f"以下是翻译\n---\n{commentary}\n我超爱我家狗狗"
    assert normalize_title(raw) == "我超爱我家狗狗"
