"""CSV export of the saved collections."""

import csv
import io
from typing import Sequence

from .core import SentenceItem, VocabularyItem

CSV_HEADER = ("Type", "English", "IPA", "Vietnamese")


def export_csv(
    words: Sequence[VocabularyItem], sentences: Sequence[SentenceItem]
) -> str:
    """Renders both collections as a spreadsheet-friendly CSV document.

    The document starts with a UTF-8 byte order mark so spreadsheet
    applications detect the Vietnamese text correctly.
    """
    buffer = io.StringIO()
    buffer.write("\ufeff")
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for word in words:
        ipa = f"/{word.ipa}/" if word.ipa else ""
        writer.writerow(("Word", word.word, ipa, word.meaning_vi))
    for sentence in sentences:
        writer.writerow(("Sentence", sentence.sentence, "", sentence.meaning_vi))
    return buffer.getvalue()
