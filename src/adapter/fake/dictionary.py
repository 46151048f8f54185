"""In-memory implementation of DictionaryPort for testing."""

import asyncio
from typing import Any

from domain.model.errors import UpstreamError

NOT_FOUND_PAYLOAD = {
    "title": "No Definitions Found",
    "message": "Sorry pal, we couldn't find definitions for the word you were looking for.",
    "resolution": "You can try the search again at later time or head to the web instead.",
}


class FakeDictionaryAdapter:
    """Fake dictionary adapter that returns preconfigured payloads per word.

    Unknown words answer with the upstream not-found object. Words listed in
    `failures` raise UpstreamError with the configured message. A `delay`
    keeps each fetch in flight long enough to observe concurrency.
    """

    def __init__(
        self,
        payloads: dict[str, list[dict[str, Any]]] | None = None,
        failures: dict[str, str] | None = None,
        delay: float = 0.0,
    ):
        self.payloads = payloads or {}
        self.failures = failures or {}
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def fetch(self, word: str) -> list[dict[str, Any]] | dict[str, Any]:
        self.calls.append(word)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if word in self.failures:
            raise UpstreamError(self.failures[word])
        if word in self.payloads:
            return self.payloads[word]
        return dict(NOT_FOUND_PAYLOAD)
