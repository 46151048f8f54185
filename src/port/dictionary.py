"""Dictionary port: outbound interface for the upstream dictionary API."""

from typing import Any, Protocol


class DictionaryPort(Protocol):
    """Port for fetching raw lexical entries.

    fetch() returns the decoded upstream payload untouched: a list of
    lexical entries, or the upstream "not found" object (a dict with a
    `title` key). Interpretation belongs to the lookup service.
    """

    async def fetch(self, word: str) -> list[dict[str, Any]] | dict[str, Any]:
        """Fetch the raw payload for a word.

        Raises:
            UpstreamError: transport failure, timeout, undecodable body,
                or an error status without the not-found shape.
        """
        ...
