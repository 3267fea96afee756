"""Item factories shared by the test modules."""

from flashvocab.core import SentenceItem, VocabularyItem

NOW = 1_700_000_000_000


def make_word(word: str, level: int = 0, next_review=None) -> VocabularyItem:
    return VocabularyItem(
        word=word, srs_level=level, next_review=next_review, meaning_vi=f"nghĩa {word}"
    )


def make_sentence(sentence: str, level: int = 0, next_review=None) -> SentenceItem:
    return SentenceItem(
        sentence=sentence, srs_level=level, next_review=next_review, date_saved=NOW
    )
