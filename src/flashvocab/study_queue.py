"""Selection and ordering of items for a review session."""

import random
from enum import Enum
from typing import List, Optional, Sequence

import structlog

from .core import ReviewableItem, SentenceItem, VocabularyItem, is_due

logger = structlog.get_logger(__name__)


class Scope(str, Enum):
    """Which collections a session draws from."""

    WORD = "word"
    SENTENCE = "sentence"
    ALL = "all"


class StudyMode(str, Enum):
    """Whether a session is limited to due items."""

    DUE = "due"
    ALL = "all"


def build_queue(
    scope: Scope,
    mode: StudyMode,
    words: Sequence[VocabularyItem],
    sentences: Sequence[SentenceItem],
    now: int,
    rng: Optional[random.Random] = None,
) -> List[ReviewableItem]:
    """Builds a shuffled review queue.

    Vocabulary candidates are taken before sentence candidates, then the whole
    sequence is shuffled uniformly. The returned items are copies, so the
    caller's collections are never mutated.

    Args:
        scope: Collections to draw from.
        mode: ``DUE`` keeps only items due at ``now``; ``ALL`` keeps everything.
        words: The saved vocabulary collection.
        sentences: The saved sentence collection.
        now: Current time in epoch milliseconds.
        rng: Random source, mostly for reproducible tests.

    Returns:
        The queue. An empty list means there is nothing to study.
    """
    scope = Scope(scope)
    mode = StudyMode(mode)

    candidates: List[ReviewableItem] = []
    if scope in (Scope.WORD, Scope.ALL):
        candidates.extend(words)
    if scope in (Scope.SENTENCE, Scope.ALL):
        candidates.extend(sentences)
    if mode is StudyMode.DUE:
        candidates = [item for item in candidates if is_due(item, now)]

    queue = [item.model_copy(deep=True) for item in candidates]
    # Uniform Fisher-Yates shuffle.
    (rng or random).shuffle(queue)

    logger.debug("queue_built", scope=scope.value, mode=mode.value, size=len(queue))
    return queue
