"""Tests for FreeDictionaryAdapter against a mocked HTTP transport."""

import sys
import unittest
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from adapter.external.free_dictionary import FreeDictionaryAdapter, MAX_TIMEOUT_SECONDS
from domain.model.errors import UpstreamError

BASE_URL = 'https://dictionary.test/api/v2/entries/en'

ENTRIES = [{'word': 'hello', 'phonetics': [], 'meanings': []}]
NOT_FOUND = {'title': 'No Definitions Found', 'message': 'Sorry pal', 'resolution': 'Try again'}


def _adapter(handler) -> tuple[FreeDictionaryAdapter, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    adapter = FreeDictionaryAdapter(base_url=BASE_URL, timeout=5, transport=httpx.MockTransport(recording))
    return adapter, requests


class TestFreeDictionaryAdapter(unittest.IsolatedAsyncioTestCase):

    async def test_returns_entry_list(self):
        adapter, requests = _adapter(lambda request: httpx.Response(200, json=ENTRIES))

        result = await adapter.fetch('hello')

        self.assertEqual(result, ENTRIES)
        self.assertEqual(len(requests), 1)
        self.assertEqual(str(requests[0].url), f'{BASE_URL}/hello')

    async def test_word_is_url_encoded(self):
        adapter, requests = _adapter(lambda request: httpx.Response(200, json=ENTRIES))

        await adapter.fetch('ice cream/x')

        self.assertEqual(requests[0].url.raw_path.decode(), '/api/v2/entries/en/ice%20cream%2Fx')

    async def test_not_found_object_is_returned_despite_404(self):
        adapter, _ = _adapter(lambda request: httpx.Response(404, json=NOT_FOUND))

        result = await adapter.fetch('qwzxv')

        self.assertEqual(result['title'], 'No Definitions Found')

    async def test_server_error_raises(self):
        adapter, _ = _adapter(lambda request: httpx.Response(500, json={'error': 'boom'}))

        with self.assertRaises(UpstreamError) as ctx:
            await adapter.fetch('hello')
        self.assertIn('HTTP 500', str(ctx.exception))

    async def test_non_json_body_raises(self):
        adapter, _ = _adapter(lambda request: httpx.Response(502, text='<html>Bad Gateway</html>'))

        with self.assertRaises(UpstreamError):
            await adapter.fetch('hello')

    async def test_unexpected_payload_type_raises(self):
        adapter, _ = _adapter(lambda request: httpx.Response(200, json={'word': 'hello'}))

        with self.assertRaises(UpstreamError):
            await adapter.fetch('hello')

    async def test_timeout_raises(self):
        def timeout(request):
            raise httpx.ReadTimeout('timed out', request=request)

        adapter, requests = _adapter(timeout)

        with self.assertRaises(UpstreamError) as ctx:
            await adapter.fetch('hello')
        self.assertIn('timed out after 5s', str(ctx.exception))
        # No retry
        self.assertEqual(len(requests), 1)

    async def test_connection_error_raises(self):
        def refused(request):
            raise httpx.ConnectError('connection refused', request=request)

        adapter, _ = _adapter(refused)

        with self.assertRaises(UpstreamError) as ctx:
            await adapter.fetch('hello')
        self.assertIn('request failed', str(ctx.exception))

    async def test_fetches_reuse_one_client(self):
        adapter, requests = _adapter(lambda request: httpx.Response(200, json=ENTRIES))

        await adapter.fetch('hello')
        client = adapter._client
        await adapter.fetch('world')

        self.assertIs(adapter._client, client)
        self.assertEqual(len(requests), 2)

        await adapter.aclose()
        self.assertTrue(client.is_closed)
        self.assertIsNone(adapter._client)

    async def test_fetch_after_close_opens_a_new_client(self):
        adapter, requests = _adapter(lambda request: httpx.Response(200, json=ENTRIES))
        await adapter.fetch('hello')
        await adapter.aclose()

        await adapter.fetch('hello')

        self.assertFalse(adapter._client.is_closed)
        self.assertEqual(len(requests), 2)
        await adapter.aclose()

    def test_timeout_is_clamped(self):
        adapter = FreeDictionaryAdapter(base_url=BASE_URL, timeout=120)

        self.assertEqual(adapter.timeout, MAX_TIMEOUT_SECONDS)

    def test_certificate_verification_enabled_by_default(self):
        self.assertTrue(FreeDictionaryAdapter(base_url=BASE_URL).verify)


if __name__ == '__main__':
    unittest.main()
