#!/usr/bin/env python3
"""
Tests for SoupTreeNode
"""

import unittest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from extractors.tree_node import SoupTreeNode

CARD_HTML = """
<div id="card" class="x styles-item-3fa y" data-rx-width="320" data-rx-height="96">
  <strong>Alice</strong> <span>posted</span>
  <div>in <a href="/teams/42">Team Sync</a></div>
  <p>Please review<br>the PR</p>
  <script>var hidden = 1;</script>
  <div hidden>secret</div>
  <div style="display: none">also secret</div>
  <div data-rx-hidden="1">collapsed thread</div>
  <!-- comment -->
  <span id="odd" data-rx-width="abc" data-rx-height="120.6">&nbsp;</span>
</div>
"""

class TestSoupTreeNode(unittest.TestCase):
    """Test cases for SoupTreeNode"""

    def setUp(self):
        self.root = SoupTreeNode.from_html(CARD_HTML)
        self.card = self.root.select_one('#card')

    def test_visible_text_lines(self):
        """Block elements and <br> start new lines, hidden content is skipped"""
        self.assertEqual(
            self.card.visible_text,
            "Alice posted\nin Team Sync\nPlease review\nthe PR"
        )

    def test_geometry(self):
        """Geometry comes from the stamped attributes"""
        self.assertEqual(self.card.rendered_width, 320)
        self.assertEqual(self.card.rendered_height, 96)

        odd = self.root.select_one('#odd')
        self.assertEqual(odd.rendered_width, 0)
        self.assertEqual(odd.rendered_height, 121)

        strong = self.card.select_one('strong')
        self.assertEqual(strong.rendered_width, 0)
        self.assertEqual(strong.rendered_height, 0)

    def test_children_and_parent(self):
        """Children are element children, the document has no parent view"""
        strong = self.card.select_one('strong')
        self.assertEqual(strong.child_count, 0)
        self.assertEqual(strong.parent, self.card)
        self.assertIsNone(self.card.parent)
        self.assertEqual(self.card.children[0], strong)

    def test_node_identity(self):
        """Views of the same element compare and hash equal"""
        first = self.root.select_one('#card')
        second = self.root.select_one('div.y')
        self.assertEqual(first, second)
        self.assertEqual(len({first, second}), 1)
        self.assertNotEqual(first, self.card.select_one('strong'))

    def test_structural_queries(self):
        """CSS selectors including class fragments and href predicates"""
        link = self.root.select_one('a[href*="/teams/"]')
        self.assertIsNotNone(link)
        self.assertEqual(link.visible_text, "Team Sync")

        self.assertEqual(len(self.root.select('div[class*="styles-item"]')), 1)
        self.assertEqual(self.root.select('div[role="listitem"]'), [])
        self.assertIsNone(self.root.select_one('div[role="listitem"]'))

    def test_iter_descendants_in_document_order(self):
        names = [node.tag_name for node in self.card.iter_descendants()]
        self.assertEqual(names[:4], ['strong', 'span', 'div', 'a'])

if __name__ == '__main__':
    unittest.main()
