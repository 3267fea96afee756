"""Exceptions raised by FlashVocab."""


class FlashVocabError(Exception):
    """Base class for all FlashVocab errors."""


class PersistenceError(FlashVocabError):
    """A collection could not be written to the item store."""


class SessionInProgressError(FlashVocabError):
    """A study session was started while another one is still presenting items."""


class NoActiveSessionError(FlashVocabError):
    """A grade was submitted while no session is presenting items."""


class LookupFailedError(FlashVocabError):
    """The lookup service failed or returned an unusable response."""
