"""Core classes for the FlashVocab spaced repetition system."""

import math
import time
from abc import abstractmethod
from enum import Enum
from typing import Dict, Iterable, List, Literal, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_LEVEL = 0
MAX_LEVEL = 4
DAY_MS = 24 * 60 * 60 * 1000

# Days until the next review, indexed by the level the item lands on.
INTERVAL_DAYS: Dict[int, int] = {0: 1, 1: 3, 2: 7, 3: 14, 4: 30}


class ItemKind(str, Enum):
    """The closed set of reviewable item variants."""

    WORD = "word"
    SENTENCE = "sentence"


class Outcome(str, Enum):
    """Result of grading one item during a review session.

    Attributes:
        CORRECT: The user recalled the item.
        INCORRECT: The user failed to recall the item.
    """

    CORRECT = "correct"
    INCORRECT = "incorrect"


def now_ms() -> int:
    """Returns the current time in milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


def clamp_level(level: Optional[int]) -> int:
    """Forces a (possibly corrupted) level into ``[MIN_LEVEL, MAX_LEVEL]``.

    Raises:
        ValueError: If ``level`` is not a finite number.
    """
    if level is None:
        return MIN_LEVEL
    try:
        value = float(level)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid level: {level!r}") from e
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"Invalid level: {level!r}")
    return max(MIN_LEVEL, min(int(value), MAX_LEVEL))


class ReviewableItem(BaseModel):
    """Review state shared by every saved item.

    Only the two variants can be built; the base class is abstract.

    Attributes:
        kind: Discriminant telling vocabulary and sentence items apart.
        srs_level: Memory strength, 0 (new) to 4 (mastered).
        next_review: Next scheduled review in epoch milliseconds. ``None`` means
            the item is due immediately.
        date_saved: Creation timestamp in epoch milliseconds.
        meaning_vi: Vietnamese meaning returned by the lookup service.
    """

    kind: ItemKind
    srs_level: int = Field(default=0, description="Memory strength level")
    next_review: Optional[int] = Field(
        default=None, description="Next review timestamp (ms)"
    )
    date_saved: Optional[int] = Field(
        default=None, description="Creation timestamp (ms)"
    )
    meaning_vi: str = Field(default="", description="Vietnamese meaning")

    # Lookup payloads carry more fields than the scheduler cares about.
    model_config = ConfigDict(extra="allow")

    @field_validator("srs_level", mode="before")
    @classmethod
    def _clamp_srs_level(cls, value: Optional[int]) -> int:
        return clamp_level(value)

    @property
    @abstractmethod
    def identity(self) -> str:
        """The text the item is stored under within its collection."""

    def matches(self, identity: str) -> bool:
        """Returns True if this item is stored under ``identity``."""
        return self.identity == identity


class VocabularyItem(ReviewableItem):
    """A saved word together with its lookup result."""

    kind: Literal["word"] = "word"
    word: str = Field(..., description="The English word")
    definition_en: str = ""
    ipa: str = ""
    syllables: str = ""
    spelling_tip: str = ""
    part_of_speech: str = ""
    example_en: str = ""
    example_vi: str = ""
    example_b2_en: str = ""
    example_b2_vi: str = ""
    root_word_mnemonic: str = ""
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    word_family: List[str] = Field(default_factory=list)
    collocations: List[str] = Field(default_factory=list)

    @property
    def identity(self) -> str:
        return self.word

    def matches(self, identity: str) -> bool:
        # Words are unique regardless of case.
        return self.word.lower() == identity.lower()

    @classmethod
    def new(cls, word: str, now: Optional[int] = None, **payload) -> "VocabularyItem":
        """Creates a freshly saved, immediately due vocabulary item."""
        ts = now_ms() if now is None else now
        return cls(word=word, srs_level=0, next_review=ts, date_saved=ts, **payload)


class SimilarSentence(BaseModel):
    en: str = ""
    vi: str = ""


class SentenceItem(ReviewableItem):
    """A saved sentence together with its lookup result."""

    kind: Literal["sentence"] = "sentence"
    sentence: str = Field(..., description="The English sentence, verbatim")
    grammar_breakdown: str = ""
    usage_context: str = ""
    naturalness_score: Optional[float] = None
    similar_sentences: List[SimilarSentence] = Field(default_factory=list)

    @property
    def identity(self) -> str:
        return self.sentence

    @classmethod
    def new(cls, sentence: str, now: Optional[int] = None, **payload) -> "SentenceItem":
        """Creates a freshly saved, immediately due sentence item."""
        ts = now_ms() if now is None else now
        return cls(
            sentence=sentence, srs_level=0, next_review=ts, date_saved=ts, **payload
        )


ItemT = TypeVar("ItemT", bound=ReviewableItem)


def is_due(item: ReviewableItem, now: int) -> bool:
    """Returns True if ``item`` is eligible for review at ``now``."""
    return item.next_review is None or item.next_review <= now


def compute_next_review(level: int, outcome: Outcome, now: int) -> Tuple[int, int]:
    """Computes the new level and next review timestamp after a grade.

    A correct answer promotes the item one level (level 4 is a plateau) and
    schedules it by the interval of the level it lands on. An incorrect answer
    demotes it one level (never below 0) and schedules it after the shortest
    interval.

    Args:
        level: Current level. Out-of-range values are clamped first.
        outcome: The grading outcome.
        now: Grading time in epoch milliseconds.

    Returns:
        A ``(new_level, next_review)`` tuple.
    """
    level = clamp_level(level)
    if Outcome(outcome) is Outcome.CORRECT:
        new_level = min(level + 1, MAX_LEVEL)
        return new_level, now + INTERVAL_DAYS[new_level] * DAY_MS
    new_level = max(level - 1, MIN_LEVEL)
    return new_level, now + INTERVAL_DAYS[MIN_LEVEL] * DAY_MS


def apply_grade(item: ItemT, outcome: Outcome, now: int) -> ItemT:
    """Returns a copy of ``item`` with level and next review updated together."""
    new_level, next_review = compute_next_review(item.srs_level, outcome, now)
    return item.model_copy(
        update={"srs_level": new_level, "next_review": next_review}, deep=True
    )


def mastery_status(level: int) -> str:
    """Maps a level to the label shown in the archive view."""
    level = clamp_level(level)
    if level >= MAX_LEVEL:
        return "mastered"
    if level >= 2:
        return "learning"
    return "new"


def level_buckets(items: Iterable[ReviewableItem]) -> Dict[int, int]:
    """Counts items per level, one bucket for each entry of INTERVAL_DAYS."""
    buckets = {level: 0 for level in INTERVAL_DAYS}
    for item in items:
        buckets[clamp_level(item.srs_level)] += 1
    return buckets


def due_count(items: Iterable[ReviewableItem], now: int) -> int:
    """Returns how many of ``items`` are due at ``now``."""
    return sum(1 for item in items if is_due(item, now))


def as_new(item: ItemT, now: Optional[int] = None) -> ItemT:
    """Returns a copy of ``item`` reset to the state of a freshly saved item."""
    ts = now_ms() if now is None else now
    return item.model_copy(
        update={"srs_level": MIN_LEVEL, "next_review": ts, "date_saved": ts}, deep=True
    )
