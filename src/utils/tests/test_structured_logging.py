"""Tests for the JSON log formatter."""

import json
import logging
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from utils.logging import JSONFormatter


class TestJSONFormatter(unittest.TestCase):

    def _record(self, message: str, **extra) -> logging.LogRecord:
        record = logging.LogRecord('services.retention_service', logging.INFO, __file__, 1, message, None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_extra_fields_become_top_level_keys(self):
        line = JSONFormatter().format(self._record('Favorite trashed', favoriteId='fav-1', ownerId='u-1'))

        data = json.loads(line)
        self.assertEqual(data['message'], 'Favorite trashed')
        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'services.retention_service')
        self.assertEqual(data['favoriteId'], 'fav-1')
        self.assertTrue(data['timestamp'].endswith('Z'))

    def test_non_json_values_are_stringified(self):
        cutoff = datetime(2024, 6, 1, tzinfo=timezone.utc)

        data = json.loads(JSONFormatter().format(self._record('Sweep', cutoff=cutoff)))

        self.assertEqual(data['cutoff'], str(cutoff))


if __name__ == '__main__':
    unittest.main()
