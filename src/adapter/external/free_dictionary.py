"""Free Dictionary API adapter.

Implements DictionaryPort by fetching raw lexical entries from the
Free Dictionary API (English only).

API Documentation: https://dictionaryapi.dev
"""

import logging
import os
from typing import Any
from urllib.parse import quote

import httpx

from domain.model.errors import UpstreamError

logger = logging.getLogger(__name__)

FREE_DICTIONARY_API_BASE_URL = os.getenv(
    'DICTIONARY_API_BASE_URL', 'https://api.dictionaryapi.dev/api/v2/entries/en'
)
MAX_TIMEOUT_SECONDS = 30.0
API_TIMEOUT_SECONDS = min(float(os.getenv('DICTIONARY_API_TIMEOUT_SECONDS', '30')), MAX_TIMEOUT_SECONDS)
# Certificate verification stays on unless explicitly disabled for a broken upstream chain
API_VERIFY_SSL = os.getenv('DICTIONARY_API_VERIFY_SSL', 'true').lower() not in ('0', 'false', 'no')


class FreeDictionaryAdapter:
    """Adapter that fetches dictionary entries from the Free Dictionary API.

    Each fetch() is exactly one GET bounded by the timeout; nothing is cached.
    One AsyncClient is opened lazily and reused for every fetch until aclose().
    """

    def __init__(
        self,
        base_url: str = FREE_DICTIONARY_API_BASE_URL,
        timeout: float = API_TIMEOUT_SECONDS,
        verify: bool = API_VERIFY_SSL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = min(timeout, MAX_TIMEOUT_SECONDS)
        self.verify = verify
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, verify=self.verify, transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_url(self, word: str) -> str:
        return f"{self.base_url}/{quote(word, safe='')}"

    async def fetch(self, word: str) -> list[dict[str, Any]] | dict[str, Any]:
        """Fetch the raw payload for a word.

        Args:
            word: The word to look up.

        Returns:
            List of raw entry dicts, or the upstream not-found object
            ({"title": "No Definitions Found", ...}).

        Raises:
            UpstreamError: On transport failure, timeout, undecodable body,
                unexpected payload type, or an error status that does not
                carry the not-found shape.
        """
        url = self._build_url(word)

        try:
            response = await self._get_client().get(url)
        except httpx.TimeoutException as e:
            logger.warning(
                "Free Dictionary API timed out",
                extra={"word": word, "timeout": self.timeout, "error_type": type(e).__name__},
            )
            raise UpstreamError(f"Dictionary API timed out after {self.timeout:g}s") from e
        except httpx.RequestError as e:
            logger.warning(
                "Free Dictionary API request error",
                extra={"word": word, "error_type": type(e).__name__, "error": str(e)},
            )
            raise UpstreamError(f"Dictionary API request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(
                "Free Dictionary API returned a non-JSON body",
                extra={"word": word, "status_code": response.status_code},
            )
            raise UpstreamError(
                f"Dictionary API returned an invalid response (HTTP {response.status_code})"
            ) from e

        # The not-found object comes back with a 404; hand it over for interpretation
        if isinstance(data, dict) and 'title' in data:
            logger.debug("Word not found in Free Dictionary API", extra={"word": word})
            return data

        if response.is_error:
            logger.warning(
                "Free Dictionary API HTTP error",
                extra={"word": word, "status_code": response.status_code},
            )
            raise UpstreamError(f"Dictionary API responded with HTTP {response.status_code}")

        if not isinstance(data, list):
            logger.warning(
                "Unexpected response type from Free Dictionary API",
                extra={"word": word, "type": type(data).__name__},
            )
            raise UpstreamError(f"Dictionary API returned an unexpected payload ({type(data).__name__})")

        logger.debug(
            "Free Dictionary API lookup successful",
            extra={"word": word, "entry_count": len(data)},
        )
        return data
