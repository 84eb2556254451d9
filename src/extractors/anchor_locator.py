#!/usr/bin/env python3
"""
Anchor Locator for Mention Extractor
Finds message containers by walking up from short timestamp leaves.

Timestamps are terse and structurally stable even when the markup around a
message changes, so the nearest reasonably sized ancestor of a timestamp is
taken as the message card.
"""

import logging
from typing import Optional, Dict, Any, List

from models import CandidateSource
from extractors.tree_node import TreeNode
from extractors.match_rules import TimestampGrammar
from extractors.common_extractor import CandidateStrategy, CandidateResult

class AnchorLocator(CandidateStrategy):
    """Strategy for locating containers through timestamp anchors"""

    DEFAULTS = {
        'max_anchor_depth': 8,
        'anchor_max_text_length': 15,
        'container_min_text_length': 30,
        'container_min_width': 200,
        'container_max_height': 600,
    }

    def __init__(self, grammar: Optional[TimestampGrammar] = None,
                 settings: Optional[Dict[str, Any]] = None,
                 log: Optional[logging.Logger] = None):
        super().__init__(log)
        self.grammar = grammar or TimestampGrammar()

        merged = dict(self.DEFAULTS)
        merged.update({key: value for key, value in (settings or {}).items() if key in self.DEFAULTS})
        self.max_depth = int(merged['max_anchor_depth'])
        self.anchor_max_text_length = int(merged['anchor_max_text_length'])
        self.min_text_length = int(merged['container_min_text_length'])
        self.min_width = int(merged['container_min_width'])
        self.max_height = int(merged['container_max_height'])

    def find_candidates(self, root: TreeNode) -> CandidateResult:
        anchors = self.find_anchors(root)
        self.logger.info(f"Found {len(anchors)} potential timestamp anchors")

        # Keyed by node identity, insertion order is anchor discovery order
        containers: Dict[TreeNode, None] = {}
        for anchor in anchors:
            container = self._find_container(anchor)
            if container is not None and container not in containers:
                containers[container] = None

        nodes = list(containers)
        if nodes:
            self.logger.info(f"Timestamp strategy found {len(nodes)} containers")
        return CandidateResult(nodes, CandidateSource.ANCHOR)

    def find_anchors(self, root: TreeNode) -> List[TreeNode]:
        """Leaf nodes whose short text fully matches the timestamp grammar"""
        anchors = []
        for node in root.iter_descendants():
            if node.child_count != 0:
                continue
            text = node.visible_text.strip()
            if text and len(text) < self.anchor_max_text_length and self.grammar.matches(text):
                anchors.append(node)
        return anchors

    def is_container(self, node: TreeNode) -> bool:
        """Text-dense, wide enough, and smaller than a whole message list"""
        if len(node.visible_text) <= self.min_text_length or node.rendered_width <= self.min_width:
            return False
        return node.rendered_height < self.max_height

    def _find_container(self, anchor: TreeNode) -> Optional[TreeNode]:
        parent = anchor.parent
        depth = 0
        while parent is not None and depth < self.max_depth:
            if self.is_container(parent):
                return parent
            parent = parent.parent
            depth += 1
        return None
