#!/usr/bin/env python3
"""Basic usage example for FlashVocab."""

import random

from flashvocab import (
    ItemKind,
    ItemStore,
    Outcome,
    SentenceItem,
    StudyService,
    VocabularyItem,
)


def main() -> None:
    """Save a few items and review them once."""
    print("FlashVocab Basic Usage Example")
    print("=" * 50)

    with ItemStore() as db:
        db.add_item(VocabularyItem.new("serendipity", meaning_vi="sự tình cờ may mắn"))
        db.add_item(VocabularyItem.new("meticulous", meaning_vi="tỉ mỉ"))
        db.add_item(SentenceItem.new("Could you give me a hand?", meaning_vi="Bạn giúp tôi một tay nhé?"))

        service = StudyService(
            db,
            on_complete=lambda results: print(f"\nDone: {len(results)} item(s) reviewed"),
            rng=random.Random(0),
        )
        if not service.start_study("all", "due"):
            print("Nothing to review")
            return

        session = service.session
        while session.current is not None:
            item = session.current
            outcome = Outcome.CORRECT if item.kind == ItemKind.WORD else Outcome.INCORRECT
            result = session.grade(outcome)
            print(f"{item.identity}: {outcome.value}, level {result.previous_level} -> {result.item.srs_level}")

        for item in db.load(ItemKind.WORD) + db.load(ItemKind.SENTENCE):
            print(f"  {item.identity}: level {item.srs_level}, next review at {item.next_review}")


if __name__ == "__main__":
    main()
