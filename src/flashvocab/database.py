"""Database module for storing the saved vocabulary and sentence collections."""

import json
from typing import Any, Dict, List, Optional, Sequence, Type

import duckdb
import structlog
from pydantic import ValidationError

from .core import ItemKind, ReviewableItem, SentenceItem, VocabularyItem
from .errors import PersistenceError

logger = structlog.get_logger(__name__)

COLLECTION_NAMES: Dict[ItemKind, str] = {
    ItemKind.WORD: "flashcards",
    ItemKind.SENTENCE: "saved_sentences",
}

ITEM_TYPES: Dict[ItemKind, Type[ReviewableItem]] = {
    ItemKind.WORD: VocabularyItem,
    ItemKind.SENTENCE: SentenceItem,
}


class ItemStore:
    """Key-value store for the two saved collections, backed by DuckDB.

    Each collection is kept as one JSON document and is always written as a
    whole. Reads never fail: a missing, unreadable or malformed collection
    comes back empty.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initializes the ItemStore connection.

        Args:
            db_path: Optional path to a DuckDB file. If None, an in-memory database is used.
        """
        self.db_path = db_path or ":memory:"
        self.connection = duckdb.connect(self.db_path)
        self._create_tables()

    def _create_tables(self) -> None:
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS collections (
                name VARCHAR PRIMARY KEY,
                payload VARCHAR NOT NULL
            )
        """
        )

    def load(self, kind: ItemKind) -> List[ReviewableItem]:
        """Loads one collection.

        Items that fail validation are skipped; a collection that cannot be
        read or decoded at all is treated as empty.

        Args:
            kind: Which collection to load.

        Returns:
            The saved items, newest first.
        """
        kind = ItemKind(kind)
        name = COLLECTION_NAMES[kind]
        try:
            row = self.connection.execute(
                "SELECT payload FROM collections WHERE name = ?", (name,)
            ).fetchone()
        except duckdb.Error as e:
            logger.warning("collection_read_failed", collection=name, error=str(e))
            return []

        if row is None:
            return []

        try:
            raw_items = json.loads(row[0])
        except (TypeError, ValueError) as e:
            logger.warning("collection_corrupt", collection=name, error=str(e))
            return []
        if not isinstance(raw_items, list):
            logger.warning("collection_corrupt", collection=name, error="not a list")
            return []

        item_type = ITEM_TYPES[kind]
        items: List[ReviewableItem] = []
        for raw in raw_items:
            if isinstance(raw, dict):
                raw = {**raw, "kind": kind.value}
            try:
                items.append(item_type.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "item_skipped", collection=name, errors=e.error_count()
                )
        return items

    def save(self, kind: ItemKind, items: Sequence[ReviewableItem]) -> None:
        """Overwrites one collection with ``items``.

        Args:
            kind: Which collection to write.
            items: The entire collection.

        Raises:
            PersistenceError: If the write fails.
        """
        kind = ItemKind(kind)
        name = COLLECTION_NAMES[kind]
        payload = json.dumps([item.model_dump(mode="json") for item in items])
        try:
            self.connection.execute(
                "INSERT OR REPLACE INTO collections (name, payload) VALUES (?, ?)",
                (name, payload),
            )
        except duckdb.Error as e:
            raise PersistenceError(f"Could not save collection {name}: {e}") from e

    def get_item(self, kind: ItemKind, identity: str) -> Optional[ReviewableItem]:
        """Returns the item saved under ``identity``, or None."""
        for item in self.load(kind):
            if item.matches(identity):
                return item
        return None

    def contains(self, kind: ItemKind, identity: str) -> bool:
        return self.get_item(kind, identity) is not None

    def add_item(self, item: ReviewableItem) -> bool:
        """Saves a new item at the front of its collection.

        Args:
            item: The item to add.

        Returns:
            False if an item with the same identity is already saved.
        """
        items = self.load(item.kind)
        if any(existing.matches(item.identity) for existing in items):
            return False
        self.save(item.kind, [item, *items])
        logger.info("item_added", kind=ItemKind(item.kind).value, identity=item.identity)
        return True

    def remove_item(self, kind: ItemKind, identity: str) -> bool:
        """Deletes the item saved under ``identity``.

        Returns:
            False if no such item was saved.
        """
        items = self.load(kind)
        kept = [item for item in items if not item.matches(identity)]
        if len(kept) == len(items):
            return False
        self.save(kind, kept)
        logger.info("item_removed", kind=ItemKind(kind).value, identity=identity)
        return True

    def toggle_item(self, item: ReviewableItem) -> bool:
        """Saves ``item`` if it is not saved yet, otherwise removes it.

        Returns:
            True if the item is saved after the call.
        """
        if self.remove_item(item.kind, item.identity):
            return False
        return self.add_item(item)

    def upsert_graded(self, item: ReviewableItem) -> bool:
        """Writes back a graded item in place of the saved one.

        An item removed since the queue was built is ignored rather than
        re-created.

        Returns:
            True if the item was found and written.
        """
        items = self.load(item.kind)
        for i, existing in enumerate(items):
            if existing.matches(item.identity):
                items[i] = item
                self.save(item.kind, items)
                return True
        logger.info(
            "graded_item_missing", kind=ItemKind(item.kind).value, identity=item.identity
        )
        return False

    def close(self) -> None:
        """Closes the database connection."""
        self.connection.close()

    def __enter__(self) -> "ItemStore":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
