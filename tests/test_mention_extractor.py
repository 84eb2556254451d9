#!/usr/bin/env python3
"""
Tests for the MentionExtractor scan pipeline
"""

import unittest
import logging
import sys
import os
from unittest.mock import Mock, PropertyMock, patch

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from models import CandidateSource
from extractors.tree_node import SoupTreeNode
from extractors.common_extractor import CandidateResult
from extractors.mention_extractor import MentionExtractor

def list_item(*lines):
    return '<div role="listitem">' + ''.join(f'<div>{line}</div>' for line in lines) + '</div>'

ANCHOR_PAGE = """
<div id="list" data-rx-width="1000" data-rx-height="2400">
  <div id="card" data-rx-width="300" data-rx-height="120">
    <div data-rx-width="280" data-rx-height="20">Dana Scully</div>
    <div data-rx-width="100" data-rx-height="20"><span data-rx-width="60" data-rx-height="16">10:31 AM</span></div>
    <div data-rx-width="280" data-rx-height="40">Can we sync about the launch?</div>
  </div>
</div>
"""

MIXED_PAGE = """
<div id="list" data-rx-width="1000" data-rx-height="2400">
  <div role="listitem" data-rx-width="300" data-rx-height="90">
    <div>Alice</div><div>in Team Sync</div><div>Please review the PR today</div>
  </div>
  <div id="other" data-rx-width="300" data-rx-height="90">
    <div>Bob</div><div><span>Yesterday</span></div><div>Here is the update you asked for</div>
  </div>
</div>
"""

class TestMentionExtractor(unittest.TestCase):
    """Test cases for MentionExtractor"""

    def setUp(self):
        self.extractor = MentionExtractor()

    def test_direct_selector_match_deduplicated(self):
        """Two identical list items produce one record"""
        item = list_item("Alice", "in Team Sync", "Please review the PR today")
        root = SoupTreeNode.from_html(item + item)

        response = self.extractor.scan(root)

        self.assertTrue(response.success)
        self.assertEqual(response.source, CandidateSource.SELECTOR)
        self.assertEqual(response.to_dict(), {
            'success': True,
            'count': 1,
            'data': [{'sender': 'Alice', 'context': 'Team Sync', 'content': 'Please review the PR today'}],
        })

    def test_direct_selector_match_distinct(self):
        root = SoupTreeNode.from_html(
            list_item("Alice", "in Team Sync", "Please review the PR today")
            + list_item("Alice", "in Team Sync", "Also update the changelog")
        )

        response = self.extractor.scan(root)

        self.assertEqual(response.count, 2)
        self.assertEqual([r.content for r in response.data],
                         ["Please review the PR today", "Also update the changelog"])

    def test_anchor_not_run_when_selector_suffices(self):
        """Two or more direct matches skip the timestamp strategy"""
        root = SoupTreeNode.from_html(
            list_item("Alice", "Please review the PR today")
            + list_item("Bob", "Here is the update you asked for")
        )

        with patch.object(self.extractor.anchor_locator, 'find_candidates',
                          wraps=self.extractor.anchor_locator.find_candidates) as spy:
            response = self.extractor.scan(root)

        spy.assert_not_called()
        self.assertEqual(response.count, 2)

    def test_anchor_fallback(self):
        """No selector match: the timestamp's grandparent is the only candidate"""
        root = SoupTreeNode.from_html(ANCHOR_PAGE)

        response = self.extractor.scan(root)

        self.assertEqual(response.source, CandidateSource.ANCHOR)
        self.assertEqual(response.count, 1)
        record = response.data[0]
        self.assertEqual(record.sender, "Dana Scully")
        self.assertEqual(record.context, "Direct Message")
        self.assertEqual(record.content, "Can we sync about the launch?")

    def test_single_selector_match_replaced_by_anchors(self):
        root = SoupTreeNode.from_html(MIXED_PAGE)

        with patch.object(self.extractor.anchor_locator, 'find_candidates',
                          wraps=self.extractor.anchor_locator.find_candidates) as spy:
            response = self.extractor.scan(root)

        spy.assert_called_once()
        self.assertEqual(response.source, CandidateSource.ANCHOR)
        self.assertEqual([r.sender for r in response.data], ["Bob"])

    def test_single_selector_match_kept_without_anchors(self):
        root = SoupTreeNode.from_html(list_item("Alice", "in Team Sync", "Please review the PR today"))

        response = self.extractor.scan(root)

        self.assertEqual(response.source, CandidateSource.SELECTOR)
        self.assertEqual(response.count, 1)

    def test_structural_mismatch_is_empty_result(self):
        root = SoupTreeNode.from_html('<main><p>Nothing here yet</p></main>')

        response = self.extractor.scan(root)

        self.assertTrue(response.success)
        self.assertEqual(response.count, 0)
        self.assertEqual(response.data, [])
        self.assertEqual(response.source, CandidateSource.NONE)

    def test_scan_is_idempotent(self):
        root = SoupTreeNode.from_html(MIXED_PAGE + ANCHOR_PAGE)

        first = self.extractor.scan(root).to_dict()
        second = self.extractor.scan(root).to_dict()

        self.assertEqual(first, second)

    def test_output_invariants(self):
        items = [
            list_item("Alice", "in Team Sync", "Please review the PR today"),
            list_item("Alice", "in Team Sync", "Please review the PR today"),
            list_item("Bob:", "Bob: replied to a thread", "x" * 800),
            list_item("Carol", "Yesterday"),
            list_item("Only one line"),
            list_item("Dana", "Dana pinned a message", "Dana shared a file with everyone in the channel"),
        ]
        root = SoupTreeNode.from_html(''.join(items))

        response = self.extractor.scan(root)
        stats = self.extractor.get_scan_stats()

        self.assertEqual(response.count, len(response.data))
        self.assertLessEqual(response.count, stats['candidates_examined'])
        self.assertEqual(stats['candidates_examined'], len(items))
        keys = [(r.sender, r.content) for r in response.data]
        self.assertEqual(len(keys), len(set(keys)))
        for record in response.data:
            with self.subTest(record=record):
                self.assertGreaterEqual(len(record.content), 1)
                self.assertLessEqual(len(record.content), 500)
                self.assertNotIn(':', record.sender)
                self.assertNotIn('：', record.sender)

    def test_candidate_failure_is_isolated(self):
        """One broken candidate does not affect the others"""
        root = SoupTreeNode.from_html(
            list_item("Alice", "Please review the PR today")
            + list_item("Bob", "Here is the update you asked for")
        )
        good = root.select('div[role="listitem"]')
        bad = Mock()
        type(bad).visible_text = PropertyMock(side_effect=RuntimeError("stale element"))
        selector = Mock()
        selector.find_candidates.return_value = CandidateResult([good[0], bad, good[1]], CandidateSource.SELECTOR)

        extractor = MentionExtractor(selector=selector, log=logging.getLogger('test.extractor'))
        with self.assertLogs('test.extractor', level='WARNING'):
            response = extractor.scan(root)

        self.assertEqual([r.sender for r in response.data], ["Alice", "Bob"])
        self.assertEqual(extractor.get_scan_stats()['skipped_candidates'], 1)

    def test_scan_never_raises(self):
        selector = Mock()
        selector.find_candidates.side_effect = RuntimeError("document detached")
        extractor = MentionExtractor(selector=selector, log=logging.getLogger('test.extractor'))

        with self.assertLogs('test.extractor', level='ERROR'):
            response = extractor.scan(SoupTreeNode.from_html('<div></div>'))

        self.assertFalse(response.success)
        self.assertEqual(response.count, 0)

    def test_scan_history_replaced_not_mutated(self):
        """A later scan never writes into the history of an earlier one"""
        first_root = SoupTreeNode.from_html(
            list_item("Alice", "Please review the PR today")
            + list_item("Bob", "Here is the update you asked for")
        )
        self.extractor.scan(first_root)
        first_history = self.extractor.scan_history
        first_snapshot = [dict(entry) for entry in first_history]

        self.extractor.scan(SoupTreeNode.from_html(ANCHOR_PAGE))

        self.assertEqual(first_history, first_snapshot)
        self.assertIsNot(self.extractor.scan_history, first_history)
        self.assertEqual(self.extractor.get_scan_stats()['strategies_used'], ['selector', 'anchor'])

    def test_configured_rules_and_time_extension(self):
        config = {
            'extraction': {'extract_time': True},
            'rules': {'match_rules': ['section.mention']},
        }
        extractor = MentionExtractor(config)
        root = SoupTreeNode.from_html(
            '<section class="mention"><div>Erin</div><div>Mon</div><div>Rollout starts after lunch</div></section>'
            '<section class="mention"><div>Frank</div><div>2:45 PM</div><div>Dashboards are back online</div></section>'
        )

        response = extractor.scan(root)

        self.assertEqual(response.to_dict()['data'], [
            {'sender': 'Erin', 'context': 'Direct Message', 'content': 'Rollout starts after lunch', 'time': 'Mon'},
            {'sender': 'Frank', 'context': 'Direct Message', 'content': 'Dashboards are back online', 'time': '2:45 PM'},
        ])
        self.assertEqual(extractor.get_scan_stats()['matched_rule'], 'rule-1')

if __name__ == '__main__':
    unittest.main()
