"""Translation pipeline: title normalization, service policy, per-item orchestration."""

from .title_normalizer import TitleNormalizer, TitleRule, normalize_title
from .pacing import Pacer
from .service import (
    SOFT_FAIL_PREFIX,
    TranslationMode,
    TranslationService,
    is_soft_fail,
    soft_fail_text,
)
from .orchestrator import TranslationOrchestrator, build_excerpt

__all__ = [
    "TitleNormalizer",
    "TitleRule",
    "normalize_title",
    "Pacer",
    "SOFT_FAIL_PREFIX",
    "TranslationMode",
    "TranslationService",
    "is_soft_fail",
    "soft_fail_text",
    "TranslationOrchestrator",
    "build_excerpt",
]
