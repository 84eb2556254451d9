#!/usr/bin/env python3
"""
Scan Client for Mention Extractor
Caller side of a scan: runs it under a wall-clock budget and turns failures
into user-facing guidance.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Optional

from models import ScanResponse
from extractors.tree_node import TreeNode
from extractors.mention_extractor import MentionExtractor
from extractors.common_extractor import ExtractionError, ScanTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_SCAN_TIMEOUT = 5.0

class ScanInvoker:
    """Invokes a scan and waits for its reply at most ``timeout`` seconds"""

    def __init__(self, extractor: MentionExtractor, timeout: float = DEFAULT_SCAN_TIMEOUT):
        self.extractor = extractor
        self.timeout = timeout

    def invoke(self, root: TreeNode, source: Optional[str] = None) -> ScanResponse:
        """
        Run one scan

        Raises:
            ScanTimeoutError: If no reply arrives in time. The scan itself is
                not interrupted and finishes in the background.
        """
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='mention-scan')
        try:
            future = executor.submit(self.extractor.scan, root)
            try:
                return future.result(timeout=self.timeout)
            except FutureTimeoutError:
                logger.error(f"Scan did not respond within {self.timeout:.1f}s")
                raise ScanTimeoutError(
                    f"Scan did not respond within {self.timeout:.1f} seconds", source
                ) from None
        finally:
            executor.shutdown(wait=False)

class ExtractionErrorHandler:
    """Centralized user-facing messages for scan outcomes"""

    SUGGESTIONS = {
        "timeout": [
            "The page did not answer in time and may be unresponsive",
            "Refresh the page and try again",
            "Increase --timeout for very long mention lists",
        ],
        "snapshot_unavailable": [
            "Check that the snapshot path or URL is correct",
            "Capture a fresh snapshot with --live",
            "Make sure you are signed in when capturing",
        ],
        "no_messages": [
            "Scroll down on the mentions page to load messages",
            "The page layout may have changed; add a match rule in the config",
            "Snapshots without geometry cannot use the timestamp fallback",
        ],
    }

    DEFAULT_SUGGESTIONS = [
        "This may be a temporary issue",
        "Try again later",
        "Run with --verbose for details",
    ]

    @staticmethod
    def no_messages_error(source: Optional[str] = None) -> ExtractionError:
        return ExtractionError("No messages found", "no_messages", source)

    @staticmethod
    def get_user_friendly_message(error: ExtractionError) -> str:
        """Get user-friendly error message with suggested solutions"""
        base_msg = str(error) or "Scan failed"
        if error.source:
            base_msg += f" ({error.source})"

        suggestions = ExtractionErrorHandler.SUGGESTIONS.get(
            error.error_type, ExtractionErrorHandler.DEFAULT_SUGGESTIONS
        )

        full_msg = f"{base_msg}.\n\nPossible solutions:\n"
        for i, suggestion in enumerate(suggestions, 1):
            full_msg += f"{i}. {suggestion}\n"

        return full_msg.strip()
