"""FlashVocab: word and sentence lookup with spaced repetition review."""

__version__ = "0.1.0"

from .core import (
    INTERVAL_DAYS,
    ItemKind,
    Outcome,
    ReviewableItem,
    SentenceItem,
    VocabularyItem,
    apply_grade,
    compute_next_review,
    is_due,
)
from .database import ItemStore
from .session import SessionState, StudyService, StudySession
from .study_queue import Scope, StudyMode, build_queue

__all__ = [
    "INTERVAL_DAYS",
    "ItemKind",
    "Outcome",
    "ReviewableItem",
    "SentenceItem",
    "VocabularyItem",
    "apply_grade",
    "compute_next_review",
    "is_due",
    "ItemStore",
    "SessionState",
    "StudyService",
    "StudySession",
    "Scope",
    "StudyMode",
    "build_queue",
]
