#!/usr/bin/env python3
"""
Field Classifier for Mention Extractor
Turns the visible text of one candidate container into a message record.

A container usually reads, line by line:
    [Sender] [action / "in <group>"] [time] ... [body]
Lines are classified with ordered heuristics; anything that does not look
like a body line is dropped.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Iterable, Tuple

from models import MessageRecord, DEFAULT_SENDER, DEFAULT_CONTEXT, MAX_CONTENT_LENGTH
from extractors.tree_node import TreeNode
from extractors.text_normalizer import TextNormalizer
from extractors.match_rules import (
    TimestampGrammar,
    SENDER_SELECTORS,
    GROUP_LINK_SELECTORS,
    ACTION_PHRASE_PATTERN,
    DAY_MARKER_PATTERN,
    CONTEXT_DELIMITER_PATTERN,
)

logger = logging.getLogger(__name__)

class RecordExtension(ABC):
    """Optional hook that adds extra fields to a finished record"""

    @abstractmethod
    def apply(self, node: TreeNode, lines: List[str], record: MessageRecord) -> None:
        pass

class TimestampExtension(RecordExtension):
    """Adds ``time``: the first line that fully matches the timestamp grammar"""

    def __init__(self, grammar: Optional[TimestampGrammar] = None):
        self.grammar = grammar or TimestampGrammar()

    def apply(self, node: TreeNode, lines: List[str], record: MessageRecord) -> None:
        for line in lines:
            if self.grammar.matches(line):
                record.extras['time'] = line
                return

class FieldClassifier:
    """Classifies container lines into sender, context and content"""

    DEFAULTS = {
        'min_lines': 2,
        'min_line_length': 6,
        'fallback_extra_chars': 20,
        'max_content_length': MAX_CONTENT_LENGTH,
    }

    def __init__(self, grammar: Optional[TimestampGrammar] = None,
                 settings: Optional[Dict[str, Any]] = None,
                 extensions: Iterable[RecordExtension] = (),
                 log: Optional[logging.Logger] = None):
        self.grammar = grammar or TimestampGrammar()
        self.extensions = list(extensions)
        self.logger = log or logger

        merged = dict(self.DEFAULTS)
        merged.update({key: value for key, value in (settings or {}).items() if key in self.DEFAULTS})
        self.min_lines = int(merged['min_lines'])
        self.min_line_length = int(merged['min_line_length'])
        self.fallback_extra_chars = int(merged['fallback_extra_chars'])
        self.max_content_length = int(merged['max_content_length'])

        self.sender_selector = ', '.join(SENDER_SELECTORS)
        self.group_link_selector = ', '.join(GROUP_LINK_SELECTORS)

    def classify(self, node: TreeNode) -> Optional[MessageRecord]:
        """
        Classify one candidate container

        Args:
            node: Candidate container

        Returns:
            MessageRecord, or None when the node does not hold a message.
            Never raises: faults are logged and the node is skipped.
        """
        try:
            return self._classify(node)
        except Exception as e:
            self.logger.warning(f"Failed to parse candidate {node!r}: {e}")
            return None

    def _classify(self, node: TreeNode) -> Optional[MessageRecord]:
        full_text = node.visible_text or ""
        lines = TextNormalizer.split_lines(full_text)

        if len(lines) < self.min_lines:
            self.logger.debug(f"Skipping candidate with {len(lines)} line(s)")
            return None

        sender = self._extract_sender(node, lines)
        context, context_line = self._extract_context(node, lines)
        content = self._extract_content(lines, sender, context_line)

        if not content and len(full_text) > len(sender) + self.fallback_extra_chars:
            content = full_text.replace(sender, '', 1).strip()

        sender = TextNormalizer.strip_colons(sender).strip() or DEFAULT_SENDER
        context = context.strip() or DEFAULT_CONTEXT
        content = TextNormalizer.truncate(content.strip(), self.max_content_length).rstrip()

        if not content:
            self.logger.debug(f"Skipping candidate without content (sender: {sender})")
            return None

        record = MessageRecord(sender=sender, content=content, context=context)
        for extension in self.extensions:
            extension.apply(node, lines, record)
        return record

    def _extract_sender(self, node: TreeNode, lines: List[str]) -> str:
        """Sender element first, then the first line unless it is a day divider"""
        sender_node = node.select_one(self.sender_selector)
        if sender_node is not None:
            text = sender_node.visible_text.strip()
            if text:
                return text

        if lines and not DAY_MARKER_PATTERN.fullmatch(lines[0]):
            return lines[0]
        return DEFAULT_SENDER

    def _extract_context(self, node: TreeNode, lines: List[str]) -> Tuple[str, Optional[str]]:
        """Return (context, line it came from); the line is None when not from text"""
        for line in lines:
            match = CONTEXT_DELIMITER_PATTERN.search(line)
            if match:
                return match.group('context'), line

        link = node.select_one(self.group_link_selector)
        if link is not None and link.visible_text.strip():
            return link.visible_text, None

        return DEFAULT_CONTEXT, None

    def _extract_content(self, lines: List[str], sender: str, context_line: Optional[str]) -> str:
        content_lines = [line for line in lines if self._is_body_line(line, sender, context_line)]
        return ' '.join(content_lines)

    def _is_body_line(self, line: str, sender: str, context_line: Optional[str]) -> bool:
        if sender in line:
            return False
        if ACTION_PHRASE_PATTERN.search(line):
            return False
        if len(line) < self.min_line_length:
            return False
        if line == context_line and CONTEXT_DELIMITER_PATTERN.match(line):
            # "in Team Sync" carries only the group name
            return False
        return not self.grammar.matches(line)
