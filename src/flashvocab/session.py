"""Review session state machine and the study entry point built on top of it."""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

import structlog

from .core import ItemKind, Outcome, ReviewableItem, apply_grade, now_ms
from .database import ItemStore
from .errors import NoActiveSessionError, SessionInProgressError
from .study_queue import Scope, StudyMode, build_queue

logger = structlog.get_logger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    PRESENTING = "presenting"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ReviewResult:
    """One graded item of a session.

    Attributes:
        item: The item after the grade was applied.
        outcome: The grade.
        previous_level: Level before the grade.
        persisted: False if the item had been removed from the store and the
            update was dropped.
    """

    item: ReviewableItem
    outcome: Outcome
    previous_level: int
    persisted: bool


class StudySession:
    """Walks a fixed queue, grading and persisting one item at a time.

    The session moves ``IDLE -> PRESENTING(0) -> ... -> PRESENTING(n-1) ->
    COMPLETED``. Every grade is written to the store before the session
    advances, so stopping midway never loses a graded item: the ungraded tail
    is simply dropped.

    Starting a new session while one is still presenting raises
    :class:`SessionInProgressError`; call :meth:`abandon` first.
    """

    def __init__(
        self,
        store: ItemStore,
        on_complete: Optional[Callable[[List[ReviewResult]], None]] = None,
    ):
        """Initializes an idle session.

        Args:
            store: Store receiving each graded item.
            on_complete: Called with the session results once the last item
                has been graded.
        """
        self.store = store
        self.on_complete = on_complete
        self.state = SessionState.IDLE
        self._queue: List[ReviewableItem] = []
        self._index = 0
        self.results: List[ReviewResult] = []

    @property
    def index(self) -> int:
        return self._index

    @property
    def queue(self) -> List[ReviewableItem]:
        return list(self._queue)

    @property
    def current(self) -> Optional[ReviewableItem]:
        """The item being presented, or None outside ``PRESENTING``."""
        if self.state is not SessionState.PRESENTING:
            return None
        return self._queue[self._index]

    @property
    def remaining(self) -> int:
        if self.state is not SessionState.PRESENTING:
            return 0
        return len(self._queue) - self._index

    def start(self, queue: Sequence[ReviewableItem]) -> bool:
        """Starts presenting ``queue``.

        Args:
            queue: The items to review, in order. The session keeps its own
                copy of the sequence.

        Returns:
            False if ``queue`` is empty. The session is then left idle.

        Raises:
            SessionInProgressError: If a session is already presenting items.
        """
        if self.state is SessionState.PRESENTING:
            raise SessionInProgressError(
                f"{self.remaining} item(s) left in the current session"
            )
        if not queue:
            self.state = SessionState.IDLE
            return False

        self._queue = list(queue)
        self._index = 0
        self.results = []
        self.state = SessionState.PRESENTING
        logger.info("session_started", size=len(self._queue))
        return True

    def grade(self, outcome: Outcome, now: Optional[int] = None) -> ReviewResult:
        """Grades the current item, persists it and advances.

        If the store write raises, the exception propagates and the session
        stays on the same item so the grade can be submitted again.

        Args:
            outcome: Whether the user recalled the item.
            now: Grading time in epoch milliseconds. Defaults to the clock.

        Returns:
            The result for the graded item.

        Raises:
            NoActiveSessionError: If the session is not presenting an item.
            PersistenceError: If the store could not save the update.
        """
        if self.state is not SessionState.PRESENTING:
            raise NoActiveSessionError(f"Cannot grade in state {self.state.value}")

        outcome = Outcome(outcome)
        item = self._queue[self._index]
        updated = apply_grade(item, outcome, now_ms() if now is None else now)
        persisted = self.store.upsert_graded(updated)

        result = ReviewResult(
            item=updated,
            outcome=outcome,
            previous_level=item.srs_level,
            persisted=persisted,
        )
        self.results.append(result)
        logger.debug(
            "item_graded",
            identity=updated.identity,
            outcome=outcome.value,
            level=updated.srs_level,
            persisted=persisted,
        )

        self._index += 1
        if self._index == len(self._queue):
            self.state = SessionState.COMPLETED
            logger.info("session_completed", graded=len(self.results))
            if self.on_complete is not None:
                self.on_complete(list(self.results))
        return result

    def abandon(self) -> List[ReviewableItem]:
        """Stops the session and returns the ungraded tail of the queue."""
        tail = self._queue[self._index:] if self.state is SessionState.PRESENTING else []
        if self.state is SessionState.PRESENTING:
            logger.info("session_abandoned", graded=len(self.results), dropped=len(tail))
        self.state = SessionState.IDLE
        self._queue = []
        self._index = 0
        return tail


class StudyService:
    """Starts study sessions from the saved collections."""

    def __init__(
        self,
        store: ItemStore,
        on_complete: Optional[Callable[[List[ReviewResult]], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.session = StudySession(store, on_complete=on_complete)
        self.rng = rng

    def start_study(
        self, scope: Scope, mode: StudyMode, now: Optional[int] = None
    ) -> bool:
        """Builds a queue and starts a session on it.

        Args:
            scope: Collections to study.
            mode: Only due items, or everything.
            now: Current time in epoch milliseconds. Defaults to the clock.

        Returns:
            False, with no session started, when nothing matches.

        Raises:
            SessionInProgressError: If a session is already presenting items.
        """
        if self.session.state is SessionState.PRESENTING:
            raise SessionInProgressError(
                f"{self.session.remaining} item(s) left in the current session"
            )
        queue = build_queue(
            scope,
            mode,
            self.store.load(ItemKind.WORD),
            self.store.load(ItemKind.SENTENCE),
            now_ms() if now is None else now,
            rng=self.rng,
        )
        return self.session.start(queue)
