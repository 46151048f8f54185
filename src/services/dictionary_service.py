"""Dictionary lookup service: one live upstream fetch, normalized.

Pipeline: DictionaryPort.fetch() → not-found detection → normalize_entries()
"""

import logging

from domain.model.errors import UpstreamError
from domain.model.word_definition import LookupOutcome
from port.dictionary import DictionaryPort
from services.lexical_normalizer import normalize_entries

logger = logging.getLogger(__name__)


class DictionaryLookupService:
    """Looks a word up upstream and returns a uniform LookupOutcome.

    Never raises for upstream trouble: not-found and failures are
    explicit outcome variants so callers can degrade gracefully.
    """

    def __init__(self, dictionary: DictionaryPort):
        self.dictionary = dictionary

    async def lookup(self, word: str) -> LookupOutcome:
        word = (word or '').strip()
        if not word:
            return LookupOutcome.not_found(word)

        try:
            payload = await self.dictionary.fetch(word)
        except UpstreamError as e:
            logger.error("Dictionary API request failed", extra={"word": word, "error": str(e)})
            return LookupOutcome.upstream_error(word, str(e))

        if isinstance(payload, dict) and 'title' in payload:
            logger.info("No definitions found", extra={"word": word})
            return LookupOutcome.not_found(word)

        if not payload:
            # An empty list is not the documented not-found shape
            logger.warning("Dictionary API returned no entries", extra={"word": word})
            return LookupOutcome.upstream_error(word, "Dictionary API returned no entries")

        try:
            definition = normalize_entries(payload)
        except (AttributeError, TypeError) as e:
            logger.error(
                "Malformed dictionary entries",
                extra={"word": word, "error": str(e)},
                exc_info=True,
            )
            return LookupOutcome.upstream_error(word, f"Malformed dictionary entries: {e}")

        logger.info("Definitions found", extra={
            "word": word,
            "entry_count": len(payload),
            "parts_of_speech": definition.parts_of_speech,
        })
        return LookupOutcome.found(word, definition)
