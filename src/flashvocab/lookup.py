"""Lookup service module for word and sentence explanations."""

import json
from abc import ABC, abstractmethod
from typing import Dict, Optional

import google.generativeai as genai
import structlog
from pydantic import ValidationError

from .config import DEFAULT_GEMINI_MODEL
from .core import SentenceItem, VocabularyItem
from .errors import LookupFailedError

logger = structlog.get_logger(__name__)

WORD_PROMPT = """You are an English-Vietnamese dictionary for Vietnamese learners.
Explain the English word (or translate the Vietnamese word into English): "{query}".
Return one JSON object with these keys:
word (the English word), meaning_vi, definition_en (max 15 words), ipa, syllables,
spelling_tip, part_of_speech, example_en, example_vi, example_b2_en, example_b2_vi,
root_word_mnemonic, synonyms (list), antonyms (list), word_family (list),
collocations (list).
Return only JSON."""

SENTENCE_PROMPT = """You are an English teacher for Vietnamese learners.
Analyse the sentence (translate it into natural English first if it is Vietnamese): "{query}".
Return one JSON object with these keys:
sentence (the English sentence), meaning_vi, grammar_breakdown, usage_context,
naturalness_score (0-10), similar_sentences (list of objects with "en" and "vi").
Return only JSON."""


def normalize_query(query: str) -> str:
    """Normalizes query text for caching and duplicate detection."""
    return " ".join(query.split()).lower()


def _get_gemini_client(api_key: str, model_name: str) -> genai.GenerativeModel:
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


def _parse_json(text: str) -> dict:
    """Extracts the JSON object from a model response.

    Models sometimes wrap JSON in a Markdown code fence even in JSON mode.
    """
    text = text.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.startswith("json"):
            text = text[len("json"):]
    try:
        data = json.loads(text)
    except ValueError as e:
        raise LookupFailedError(f"Response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise LookupFailedError("Response is not a JSON object")
    return data


REVIEW_FIELDS = ("kind", "srs_level", "next_review", "date_saved", "now")


def _payload(data: dict) -> dict:
    """Drops review-state keys the model has no business setting."""
    return {key: value for key, value in data.items() if key not in REVIEW_FIELDS}


class LookupService(ABC):
    """Abstract base class for lookup services.

    Results are unsaved items: callers decide whether to add them to the store.
    """

    @abstractmethod
    def lookup_word(self, query: str) -> VocabularyItem:
        """Looks up a single word.

        Args:
            query: An English or Vietnamese word.

        Returns:
            The lookup result as a new vocabulary item.

        Raises:
            LookupFailedError: If the service fails or answers with unusable data.
        """

    @abstractmethod
    def lookup_sentence(self, query: str) -> SentenceItem:
        """Looks up a sentence.

        Args:
            query: An English or Vietnamese sentence.

        Returns:
            The lookup result as a new sentence item.

        Raises:
            LookupFailedError: If the service fails or answers with unusable data.
        """


class GeminiLookupService(LookupService):
    """Google Gemini API service for dictionary lookups."""

    def __init__(self, api_key: str, model_name: str = DEFAULT_GEMINI_MODEL):
        self.api_key = api_key
        self.model_name = model_name
        self.client: Optional[genai.GenerativeModel] = None

    def _generate(self, prompt: str) -> dict:
        if self.client is None:
            self.client = _get_gemini_client(self.api_key, self.model_name)
        try:
            response = self.client.generate_content(
                prompt,
                generation_config={
                    "temperature": 0.2,
                    "response_mime_type": "application/json",
                },
            )
            text = response.text
        except Exception as e:
            logger.warning("gemini_request_failed", model=self.model_name, error=str(e))
            raise LookupFailedError(f"Gemini request failed: {e}") from e
        return _parse_json(text)

    def lookup_word(self, query: str) -> VocabularyItem:
        data = _payload(self._generate(WORD_PROMPT.format(query=query.strip())))
        data.setdefault("word", query.strip())
        try:
            return VocabularyItem.new(**data)
        except (TypeError, ValidationError) as e:
            raise LookupFailedError(f"Unexpected word lookup result: {e}") from e

    def lookup_sentence(self, query: str) -> SentenceItem:
        data = _payload(self._generate(SENTENCE_PROMPT.format(query=query.strip())))
        data.setdefault("sentence", query.strip())
        try:
            return SentenceItem.new(**data)
        except (TypeError, ValidationError) as e:
            raise LookupFailedError(f"Unexpected sentence lookup result: {e}") from e


class CachedLookupService(LookupService):
    """Memoizes another lookup service by normalized query text.

    Failed lookups are not cached. Cached results are returned as copies so a
    caller saving one cannot alter the cache.
    """

    def __init__(self, service: LookupService):
        self.service = service
        self._words: Dict[str, VocabularyItem] = {}
        self._sentences: Dict[str, SentenceItem] = {}

    def lookup_word(self, query: str) -> VocabularyItem:
        key = normalize_query(query)
        if key not in self._words:
            self._words[key] = self.service.lookup_word(query)
        else:
            logger.debug("lookup_cache_hit", kind="word", query=key)
        return self._words[key].model_copy(deep=True)

    def lookup_sentence(self, query: str) -> SentenceItem:
        key = normalize_query(query)
        if key not in self._sentences:
            self._sentences[key] = self.service.lookup_sentence(query)
        else:
            logger.debug("lookup_cache_hit", kind="sentence", query=key)
        return self._sentences[key].model_copy(deep=True)

    def clear(self) -> None:
        self._words.clear()
        self._sentences.clear()
