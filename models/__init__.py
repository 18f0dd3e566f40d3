"""
Data Models
"""
from .schemas import (
    Reply,
    SourceItem,
    TranslatedReply,
    OriginalContent,
    TranslatedContent,
    TranslationResult,
    LedgerEntry,
    LedgerIndex,
    Candidate,
    CandidateList,
    extract_id_from_url,
)

__all__ = [
    "Reply",
    "SourceItem",
    "TranslatedReply",
    "OriginalContent",
    "TranslatedContent",
    "TranslationResult",
    "LedgerEntry",
    "LedgerIndex",
    "Candidate",
    "CandidateList",
    "extract_id_from_url",
]
