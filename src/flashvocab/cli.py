"""Command-line interface for FlashVocab."""

import argparse
import sys
from typing import Callable, List, Optional

from .config import Settings
from .core import (
    DAY_MS,
    INTERVAL_DAYS,
    ItemKind,
    Outcome,
    ReviewableItem,
    SentenceItem,
    VocabularyItem,
    as_new,
    due_count,
    is_due,
    level_buckets,
    mastery_status,
    now_ms,
)
from .database import ItemStore
from .errors import FlashVocabError, LookupFailedError
from .export import export_csv
from .logging_config import configure_logging
from .lookup import CachedLookupService, GeminiLookupService, LookupService
from .session import StudyService
from .study_queue import Scope, StudyMode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="FlashVocab: save words and sentences, review them with spaced repetition"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Add word command
    word_parser = subparsers.add_parser("add-word", help="Save a word")
    word_parser.add_argument("word", help="Word to learn")
    word_parser.add_argument("--meaning", default="", help="Vietnamese meaning")
    word_parser.add_argument("--ipa", default="", help="IPA transcription")
    word_parser.add_argument("--example", default="", help="Example sentence")
    word_parser.add_argument(
        "--lookup", action="store_true", help="Fill in the details with the lookup service"
    )

    # Add sentence command
    sentence_parser = subparsers.add_parser("add-sentence", help="Save a sentence")
    sentence_parser.add_argument("sentence", help="Sentence to learn")
    sentence_parser.add_argument("--meaning", default="", help="Vietnamese meaning")
    sentence_parser.add_argument(
        "--lookup", action="store_true", help="Fill in the details with the lookup service"
    )

    # Remove command
    remove_parser = subparsers.add_parser("remove", help="Remove a saved item")
    remove_parser.add_argument("kind", choices=[k.value for k in ItemKind])
    remove_parser.add_argument("identity", help="The word or the exact sentence")

    # List command
    list_parser = subparsers.add_parser("list", help="List saved items")
    list_parser.add_argument("--kind", choices=[k.value for k in ItemKind])

    subparsers.add_parser("stats", help="Show review statistics")

    # Study command
    study_parser = subparsers.add_parser("study", help="Review saved items")
    study_parser.add_argument(
        "--scope", choices=[s.value for s in Scope], default=Scope.ALL.value
    )
    study_parser.add_argument(
        "--mode", choices=[m.value for m in StudyMode], default=StudyMode.DUE.value
    )

    # Export command
    export_parser = subparsers.add_parser("export", help="Export saved items as CSV")
    export_parser.add_argument("--output", help="File to write (default: stdout)")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    db = ItemStore(settings.db_path)
    try:
        if args.command == "add-word":
            add_word(db, args, _lookup_service(settings) if args.lookup else None)
        elif args.command == "add-sentence":
            add_sentence(db, args, _lookup_service(settings) if args.lookup else None)
        elif args.command == "remove":
            remove_item(db, ItemKind(args.kind), args.identity)
        elif args.command == "list":
            list_items(db, ItemKind(args.kind) if args.kind else None)
        elif args.command == "stats":
            show_stats(db)
        elif args.command == "study":
            study(db, Scope(args.scope), StudyMode(args.mode))
        elif args.command == "export":
            export_items(db, args.output)
    except LookupFailedError as e:
        print(f"Error: lookup failed: {e}")
        sys.exit(1)
    except FlashVocabError as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()


def _lookup_service(settings: Settings) -> LookupService:
    if not settings.gemini_api_key:
        print("Error: No API key provided for the lookup service")
        print("Set GEMINI_API_KEY environment variable or add it to .env")
        sys.exit(1)
    return CachedLookupService(
        GeminiLookupService(settings.gemini_api_key, settings.gemini_model)
    )


def add_word(
    db: ItemStore, args: argparse.Namespace, lookup: Optional[LookupService] = None
) -> None:
    """Save a word, optionally filled in by the lookup service."""
    if lookup is not None:
        item = as_new(lookup.lookup_word(args.word))
    else:
        item = VocabularyItem.new(
            args.word.strip(),
            meaning_vi=args.meaning,
            ipa=args.ipa,
            example_en=args.example,
        )
    _save(db, item)


def add_sentence(
    db: ItemStore, args: argparse.Namespace, lookup: Optional[LookupService] = None
) -> None:
    """Save a sentence, optionally filled in by the lookup service."""
    if lookup is not None:
        item = as_new(lookup.lookup_sentence(args.sentence))
    else:
        item = SentenceItem.new(args.sentence.strip(), meaning_vi=args.meaning)
    _save(db, item)


def _save(db: ItemStore, item: ReviewableItem) -> None:
    if db.add_item(item):
        print(f"Saved {item.kind}: {item.identity}")
        if item.meaning_vi:
            print(f"Meaning: {item.meaning_vi}")
    else:
        print(f"Already saved: {item.identity}")


def remove_item(db: ItemStore, kind: ItemKind, identity: str) -> None:
    if db.remove_item(kind, identity):
        print(f"Removed {kind.value}: {identity}")
    else:
        print(f"Not found: {identity}")


def list_items(db: ItemStore, kind: Optional[ItemKind] = None) -> None:
    """List saved items with their level and mastery status."""
    kinds = [kind] if kind else list(ItemKind)
    now = now_ms()
    for k in kinds:
        items = db.load(k)
        print(f"=== {k.value.capitalize()}s ({len(items)}) ===")
        for item in items:
            due = " [due]" if is_due(item, now) else ""
            print(
                f"  L{item.srs_level} {mastery_status(item.srs_level):<8} "
                f"{item.identity}: {item.meaning_vi}{due}"
            )


def show_stats(db: ItemStore) -> None:
    """Show level buckets and due counts."""
    words = db.load(ItemKind.WORD)
    sentences = db.load(ItemKind.SENTENCE)
    now = now_ms()

    print("=== Review Statistics ===")
    print(f"Words: {len(words)} ({due_count(words, now)} due)")
    print(f"Sentences: {len(sentences)} ({due_count(sentences, now)} due)")
    for level, count in level_buckets([*words, *sentences]).items():
        print(f"  Level {level} ({INTERVAL_DAYS[level]} days): {count}")


def study(
    db: ItemStore,
    scope: Scope,
    mode: StudyMode,
    input_fn: Callable[[str], str] = input,
) -> None:
    """Run an interactive study session."""
    service = StudyService(db)
    if not service.start_study(scope, mode):
        print("No items to review!")
        return

    session = service.session
    print(f"Studying {session.remaining} item(s). Answer y/n, or q to stop.")
    while session.current is not None:
        item = session.current
        print(f"\n--- {session.index + 1}/{len(session.queue)}: {item.identity} ---")
        answer = input_fn("Show meaning? [Enter] ")
        if answer.strip().lower() == "q":
            break
        print(f"Meaning: {item.meaning_vi}")

        while True:
            answer = input_fn("Did you remember it? (y/n/q): ").strip().lower()
            if answer in ("y", "n", "q"):
                break
            print("Please answer y, n or q")
        if answer == "q":
            break

        now = now_ms()
        result = session.grade(
            Outcome.CORRECT if answer == "y" else Outcome.INCORRECT, now=now
        )
        days = (result.item.next_review - now) // DAY_MS
        print(
            f"Level {result.previous_level} -> {result.item.srs_level}, "
            f"next review in {days} day(s)"
        )

    if session.current is not None:
        dropped = session.abandon()
        print(f"\nStopped. {len(session.results)} graded, {len(dropped)} left for later.")
    else:
        print(f"\nSession complete! {len(session.results)} item(s) reviewed.")


def export_items(db: ItemStore, output: Optional[str] = None) -> None:
    """Export both collections as CSV."""
    document = export_csv(db.load(ItemKind.WORD), db.load(ItemKind.SENTENCE))
    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(document)
        print(f"Exported to {output}")
    else:
        sys.stdout.write(document)


if __name__ == "__main__":
    main()
