#!/usr/bin/env python3
"""
Tests for record deduplication and MessageRecord
"""

import unittest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from models import MessageRecord
from extractors.deduplicator import deduplicate_records

class TestDeduplicator(unittest.TestCase):
    """Test cases for deduplicate_records"""

    def test_first_occurrence_kept_in_order(self):
        records = [
            MessageRecord("Alice", "Please review the PR", "Team Sync"),
            MessageRecord("Bob", "Looks good to me"),
            MessageRecord("Alice", "Please review the PR", "Another Group"),
            MessageRecord("Carol", "Shipping it now"),
            MessageRecord("Bob", "Looks good to me"),
        ]

        unique = deduplicate_records(records)

        self.assertEqual(
            [(r.sender, r.content) for r in unique],
            [("Alice", "Please review the PR"), ("Bob", "Looks good to me"), ("Carol", "Shipping it now")]
        )
        self.assertIs(unique[0], records[0])
        self.assertEqual(unique[0].context, "Team Sync")

    def test_same_content_different_sender_kept(self):
        records = [
            MessageRecord("Alice", "Thanks!"),
            MessageRecord("Bob", "Thanks!"),
        ]

        self.assertEqual(len(deduplicate_records(records)), 2)

    def test_empty_input(self):
        self.assertEqual(deduplicate_records([]), [])

class TestMessageRecord(unittest.TestCase):
    """Test cases for MessageRecord"""

    def test_defaults(self):
        record = MessageRecord("Alice", "Hello there")
        self.assertEqual(record.context, "Direct Message")
        self.assertEqual(record.extras, {})

    def test_empty_content_rejected(self):
        for content in ["", "   "]:
            with self.subTest(content=content):
                with self.assertRaises(ValueError):
                    MessageRecord("Alice", content)

if __name__ == '__main__':
    unittest.main()
