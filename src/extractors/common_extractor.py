#!/usr/bin/env python3
"""
Common Extraction Components for Mention Extractor
Shared result containers, errors and the candidate strategy interface.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime

from models import CandidateSource
from extractors.tree_node import TreeNode

logger = logging.getLogger(__name__)

class CandidateResult:
    """Container for candidate nodes with the strategy that found them"""

    def __init__(self, nodes: List[TreeNode], source: CandidateSource = CandidateSource.NONE,
                 rule_name: Optional[str] = None):
        self.nodes = nodes
        self.source = source
        self.rule_name = rule_name  # Which match rule succeeded, if any
        self.success = len(nodes) > 0

    def __len__(self) -> int:
        return len(self.nodes)

class ExtractionError(Exception):
    """Base exception for errors raised around a scan (loading, invoking)"""

    def __init__(self, message: str, error_type: str = "general", source: Optional[str] = None):
        super().__init__(message)
        self.error_type = error_type
        self.source = source
        self.timestamp = datetime.now()

class SnapshotError(ExtractionError):
    """A page snapshot could not be read, fetched or captured"""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message, "snapshot_unavailable", source)

class ScanTimeoutError(ExtractionError):
    """The scan did not answer within the caller's budget"""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message, "timeout", source)

class CandidateStrategy(ABC):
    """Abstract base class for candidate container strategies"""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    @abstractmethod
    def find_candidates(self, root: TreeNode) -> CandidateResult:
        """Return candidate message containers under root"""
        pass
