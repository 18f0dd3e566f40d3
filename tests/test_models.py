from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import CandidateList, SourceItem, TranslationResult, extract_id_from_url


def test_id_is_derived_from_url_when_missing() -> None:
    item = SourceItem(id="", title="x", url="https://www.reddit.com/r/dogs/comments/abc123/i_love_my_dog/")
    assert item.id == "abc123"


def test_unknown_id_when_url_has_none() -> None:
    assert extract_id_from_url("https://example.com/post") == "unknown"
    assert SourceItem.model_validate({"title": "x"}).id == "unknown"


def test_created_is_kept_verbatim() -> None:
    assert SourceItem(id="a", created="2026-01-01T00:00:00Z").created == "2026-01-01T00:00:00Z"
    assert SourceItem(id="a", created=1700000000.5).created == 1700000000.5


def test_translation_result_is_frozen() -> None:
    result = TranslationResult(id="a", title="t", title_zh="标题", translated_at="now")

    with pytest.raises(ValidationError):
        result.title_zh = "改"


def test_candidate_list_keeps_unknown_fields() -> None:
    candidates = CandidateList.model_validate(
        {"generated_at": "2026-01-01", "qualified": [{"id": "abc123", "permalink": "/r/x/", "score": 42}]}
    )

    assert len(candidates.qualified) == 1
    assert candidates.qualified[0].model_extra == {"score": 42}
