#!/usr/bin/env python3
"""
Mention Extractor scan pipeline
Coordinates candidate strategies, field classification and deduplication.
"""

import logging
from typing import Optional, Dict, Any, List

from models import MessageRecord, ScanResponse, CandidateSource
from extractors.tree_node import TreeNode
from extractors.match_rules import load_match_rules, load_timestamp_grammar
from extractors.common_extractor import CandidateResult
from extractors.node_selector import NodeSelector
from extractors.anchor_locator import AnchorLocator
from extractors.field_classifier import FieldClassifier, TimestampExtension
from extractors.deduplicator import deduplicate_records

logger = logging.getLogger(__name__)

class MentionExtractor:
    """
    One-shot, synchronous scan of a rendered mentions page

    Selector cascade first; when it finds fewer than ``min_direct_candidates``
    nodes the timestamp anchor strategy takes over. Each candidate is
    classified on its own and the records are deduplicated.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 selector: Optional[NodeSelector] = None,
                 anchor_locator: Optional[AnchorLocator] = None,
                 classifier: Optional[FieldClassifier] = None,
                 log: Optional[logging.Logger] = None):
        self.config = config or {}
        self.logger = log or logger

        extraction = self.config.get('extraction', {}) or {}
        self.min_direct_candidates = int(extraction.get('min_direct_candidates', 2))

        grammar = load_timestamp_grammar(self.config)
        extensions = [TimestampExtension(grammar)] if extraction.get('extract_time', False) else []

        self.selector = selector or NodeSelector(load_match_rules(self.config), log=self.logger)
        self.anchor_locator = anchor_locator or AnchorLocator(grammar, extraction, log=self.logger)
        self.classifier = classifier or FieldClassifier(grammar, extraction, extensions, log=self.logger)

        # Steps of the last finished scan
        self.scan_history: List[Dict[str, Any]] = []

    def scan(self, root: TreeNode) -> ScanResponse:
        """
        Scan the tree under root

        Args:
            root: Document root view

        Returns:
            ScanResponse; ``count == 0`` when neither strategy finds messages.
            Never raises.
        """
        history: List[Dict[str, Any]] = []
        self.logger.info("Received scan request")

        try:
            candidates = self.find_candidates(root, history)
            records = self._classify_all(candidates, history)
            unique_records = deduplicate_records(records)
        except Exception as e:
            self.logger.error(f"Scan aborted by unexpected error: {e}")
            self.scan_history = history
            return ScanResponse([], success=False)

        history.append({
            'step': 'deduplicate',
            'record_count': len(records),
            'unique_count': len(unique_records),
        })
        self.scan_history = history
        self.logger.info(f"Returning {len(unique_records)} unique messages")
        return ScanResponse(unique_records, success=True, source=candidates.source)

    def find_candidates(self, root: TreeNode,
                        history: Optional[List[Dict[str, Any]]] = None) -> CandidateResult:
        """Run the strategy cascade and return the winning candidate set"""
        history = history if history is not None else []
        result = self.selector.find_candidates(root)
        self._record_attempt(history, 'selector', result)

        if len(result) >= self.min_direct_candidates:
            return result

        self.logger.info("Selector strategy yielded few results, trying timestamp anchor strategy")
        anchored = self.anchor_locator.find_candidates(root)
        self._record_attempt(history, 'anchor', anchored)

        if anchored.success:
            return anchored
        if result.success:
            self.logger.debug(f"Keeping {len(result)} selector match(es), no anchored containers found")
            return result
        return CandidateResult([], CandidateSource.NONE)

    def _classify_all(self, candidates: CandidateResult,
                      history: List[Dict[str, Any]]) -> List[MessageRecord]:
        records = []
        skipped = 0
        for node in candidates.nodes:
            record = self.classifier.classify(node)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        history.append({
            'step': 'classify',
            'candidate_count': len(candidates),
            'record_count': len(records),
            'skipped_count': skipped,
        })
        if skipped:
            self.logger.debug(f"Skipped {skipped} of {len(candidates)} candidates")
        return records

    def _record_attempt(self, history: List[Dict[str, Any]], strategy: str,
                        result: CandidateResult) -> None:
        history.append({
            'step': strategy,
            'success': result.success,
            'candidate_count': len(result),
            'rule': result.rule_name,
        })

    def get_scan_stats(self) -> dict:
        """Get statistics about the last scan"""
        if not self.scan_history:
            return {}

        strategies = [entry for entry in self.scan_history if entry['step'] in ('selector', 'anchor')]
        classify = next((entry for entry in self.scan_history if entry['step'] == 'classify'), {})
        dedup = next((entry for entry in self.scan_history if entry['step'] == 'deduplicate'), {})

        return {
            'strategies_used': [entry['step'] for entry in strategies],
            'matched_rule': next((entry['rule'] for entry in strategies if entry.get('rule')), None),
            'candidates_examined': classify.get('candidate_count', 0),
            'records_before_dedup': classify.get('record_count', 0),
            'skipped_candidates': classify.get('skipped_count', 0),
            'unique_records': dedup.get('unique_count', 0),
        }
