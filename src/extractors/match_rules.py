#!/usr/bin/env python3
"""
Match Rules for Mention Extractor
Selector cascade, timestamp grammar and line patterns kept as plain data so
new page layouts can be supported by editing lists instead of logic.
"""

import re
import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Iterable, Pattern, Union

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class MatchRule:
    """A structural pattern tried by the node selector"""
    name: str
    selector: str
    priority: int = 0

# Message item containers, most specific layout first
DEFAULT_MATCH_RULES = (
    MatchRule('list-item-role', 'div[role="listitem"]', 1),
    MatchRule('message-item-test-id', 'div[data-test-id="message-item"]', 2),
    MatchRule('mention-test-id', 'div[data-test-id^="mention-"]', 3),
    MatchRule('mention-item-class', '.MentionItem', 4),
    MatchRule('styles-item-class', 'div[class*="styles-item"]', 5),
    MatchRule('message-item-class', 'div[class*="MessageItem"]', 6),
)

# Clock time, relative day, short weekday, M/D date
DEFAULT_TIMESTAMP_PATTERNS = (
    r'\d{1,2}:\d{2}\s?(?:AM|PM)',
    r'Yesterday',
    r'Today',
    r'(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)',
    r'\d{1,2}/\d{1,2}',
)

# Descendants that carry the sender name
SENDER_SELECTORS = (
    'span[class*="sender"]',
    'strong',
    '[data-test-id="message-sender"]',
)

# Links whose target names a team or group conversation
GROUP_LINK_SELECTORS = (
    'a[href*="/teams/"]',
    'a[href*="/glip/groups"]',
)

# UI chrome lines, not message bodies
ACTION_PHRASE_PATTERN = re.compile(r'replied to|shared a|added|pinned', re.IGNORECASE)

# Section dividers that can sit where a sender name would
DAY_MARKER_PATTERN = re.compile(r'(?:Today|Yesterday)', re.IGNORECASE)

# "Alice in Team Sync" / "in Team Sync"
CONTEXT_DELIMITER_PATTERN = re.compile(r'(?:^|\s)in\s+(?P<context>\S.*)$')

class TimestampGrammar:
    """Set of alternatives a short leaf text must fully match to be a time anchor"""

    def __init__(self, patterns: Iterable[str] = DEFAULT_TIMESTAMP_PATTERNS):
        self.patterns = tuple(patterns)
        if not self.patterns:
            raise ValueError("TimestampGrammar requires at least one pattern")
        combined = '|'.join(f'(?:{pattern})' for pattern in self.patterns)
        self._regex: Pattern = re.compile(combined, re.IGNORECASE)

    def matches(self, text: Optional[str]) -> bool:
        if not text:
            return False
        return self._regex.fullmatch(text.strip()) is not None

    def __repr__(self) -> str:
        return f"TimestampGrammar({len(self.patterns)} patterns)"

def load_match_rules(config: Optional[Dict[str, Any]] = None) -> List[MatchRule]:
    """
    Build the selector cascade from configuration

    ``rules.match_rules`` may be null (built-in cascade) or a list of selector
    strings / ``{name, selector}`` mappings. List order is priority order.
    """
    raw_rules = ((config or {}).get('rules') or {}).get('match_rules')
    if not raw_rules:
        return list(DEFAULT_MATCH_RULES)
    if not isinstance(raw_rules, (list, tuple)):
        logger.warning(f"rules.match_rules must be a list, got {type(raw_rules).__name__}; using built-in cascade")
        return list(DEFAULT_MATCH_RULES)

    rules = []
    for priority, entry in enumerate(raw_rules, 1):
        rule = _parse_rule(entry, priority)
        if rule:
            rules.append(rule)

    if not rules:
        logger.warning("No usable match rules in configuration, using built-in cascade")
        return list(DEFAULT_MATCH_RULES)

    logger.debug(f"Loaded {len(rules)} match rules from configuration")
    return rules

def _parse_rule(entry: Union[str, Dict[str, Any]], priority: int) -> Optional[MatchRule]:
    if isinstance(entry, str) and entry.strip():
        return MatchRule(f'rule-{priority}', entry.strip(), priority)

    if isinstance(entry, dict) and entry.get('selector'):
        name = entry.get('name') or f'rule-{priority}'
        return MatchRule(str(name), str(entry['selector']).strip(), priority)

    logger.warning(f"Ignoring invalid match rule entry: {entry!r}")
    return None

def load_timestamp_grammar(config: Optional[Dict[str, Any]] = None) -> TimestampGrammar:
    """Build the timestamp grammar from ``rules.timestamp_patterns`` or the defaults"""
    patterns = ((config or {}).get('rules') or {}).get('timestamp_patterns')
    if not patterns:
        return TimestampGrammar()
    if not isinstance(patterns, (list, tuple)):
        logger.warning(f"rules.timestamp_patterns must be a list, got {type(patterns).__name__}; using built-in grammar")
        return TimestampGrammar()

    try:
        return TimestampGrammar(str(pattern) for pattern in patterns)
    except re.error as e:
        logger.warning(f"Invalid timestamp pattern in configuration ({e}), using built-in grammar")
        return TimestampGrammar()
