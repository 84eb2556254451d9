#!/usr/bin/env python3
"""
Node Selector for Mention Extractor
Tries the match rule cascade and keeps the first rule that finds anything.
"""

import logging
from typing import Optional, List, Iterable

from models import CandidateSource
from extractors.tree_node import TreeNode
from extractors.match_rules import MatchRule, DEFAULT_MATCH_RULES
from extractors.common_extractor import CandidateStrategy, CandidateResult

class NodeSelector(CandidateStrategy):
    """Strategy for direct structural matching of message items"""

    def __init__(self, rules: Iterable[MatchRule] = DEFAULT_MATCH_RULES,
                 log: Optional[logging.Logger] = None):
        super().__init__(log)
        self.rules: List[MatchRule] = sorted(rules, key=lambda rule: rule.priority)

    def find_candidates(self, root: TreeNode) -> CandidateResult:
        """
        Return the matches of the first rule that yields at least one node

        Rules never merge: nodes from different layout variants are not mixed.
        """
        for rule in self.rules:
            try:
                found = root.select(rule.selector)
            except Exception as e:
                self.logger.warning(f"Match rule '{rule.name}' ({rule.selector}) failed: {e}")
                continue

            if found:
                self.logger.info(f"Selector strategy matched rule '{rule.name}' ({rule.selector}), count: {len(found)}")
                return CandidateResult(found, CandidateSource.SELECTOR, rule.name)

        self.logger.debug("No match rule found any nodes")
        return CandidateResult([], CandidateSource.SELECTOR)
