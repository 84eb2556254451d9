#!/usr/bin/env python3
"""
Tree Node views for Mention Extractor
Read-only access to rendered text, children, geometry and structural queries.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any, Iterator
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, CData, Declaration, Doctype, ProcessingInstruction

from extractors.text_normalizer import TextNormalizer

logger = logging.getLogger(__name__)

# Attributes written by the capture script (see page_capture.GEOMETRY_STAMP_JS)
WIDTH_ATTR = 'data-rx-width'
HEIGHT_ATTR = 'data-rx-height'
HIDDEN_ATTR = 'data-rx-hidden'

BLOCK_TAGS = frozenset([
    'address', 'article', 'aside', 'blockquote', 'dd', 'details', 'dialog',
    'div', 'dl', 'dt', 'fieldset', 'figcaption', 'figure', 'footer', 'form',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'header', 'hr', 'li', 'main', 'nav',
    'ol', 'p', 'pre', 'section', 'summary', 'table', 'tr', 'ul',
])

SKIPPED_TAGS = frozenset(['script', 'style', 'template', 'noscript', 'head', 'title', 'meta', 'link'])

_NON_TEXT_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)

_DISPLAY_NONE = re.compile(r'display\s*:\s*none', re.IGNORECASE)

class TreeNode(ABC):
    """Abstract read-only view of one element in a rendered document"""

    @property
    @abstractmethod
    def visible_text(self) -> str:
        """Rendered text, one visual line per line break"""
        pass

    @property
    @abstractmethod
    def children(self) -> List['TreeNode']:
        pass

    @property
    @abstractmethod
    def parent(self) -> Optional['TreeNode']:
        pass

    @property
    @abstractmethod
    def rendered_width(self) -> int:
        pass

    @property
    @abstractmethod
    def rendered_height(self) -> int:
        pass

    @abstractmethod
    def select(self, pattern: str) -> List['TreeNode']:
        """Return descendants matching a structural pattern, in document order"""
        pass

    @abstractmethod
    def iter_descendants(self) -> Iterator['TreeNode']:
        pass

    @property
    def child_count(self) -> int:
        return len(self.children)

    def select_one(self, pattern: str) -> Optional['TreeNode']:
        matches = self.select(pattern)
        return matches[0] if matches else None

class SoupTreeNode(TreeNode):
    """
    TreeNode backed by a BeautifulSoup element

    Geometry is read from the attributes stamped by the capture script. Nodes
    without them report a zero-sized box.
    """

    def __init__(self, element: Tag, text_cache: Optional[Dict[int, str]] = None):
        self.element = element
        self._text_cache = text_cache if text_cache is not None else {}

    @classmethod
    def from_html(cls, html: str, parser: str = 'html.parser') -> 'SoupTreeNode':
        """Parse HTML and return a view of the document root"""
        return cls(BeautifulSoup(html, parser))

    def _wrap(self, element: Tag) -> 'SoupTreeNode':
        return SoupTreeNode(element, self._text_cache)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, SoupTreeNode) and other.element is self.element

    def __hash__(self) -> int:
        return id(self.element)

    def __repr__(self) -> str:
        return f"SoupTreeNode(<{self.element.name}>)"

    @property
    def tag_name(self) -> str:
        return self.element.name or ''

    def get_attribute(self, name: str) -> Optional[str]:
        value = self.element.get(name)
        if isinstance(value, list):
            return ' '.join(value)
        return value

    @property
    def visible_text(self) -> str:
        key = id(self.element)
        if key not in self._text_cache:
            self._text_cache[key] = self._render_text()
        return self._text_cache[key]

    @property
    def children(self) -> List['SoupTreeNode']:
        return [self._wrap(child) for child in self.element.children if isinstance(child, Tag)]

    @property
    def parent(self) -> Optional['SoupTreeNode']:
        parent = self.element.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return self._wrap(parent)

    @property
    def rendered_width(self) -> int:
        return self._read_dimension(WIDTH_ATTR)

    @property
    def rendered_height(self) -> int:
        return self._read_dimension(HEIGHT_ATTR)

    def select(self, pattern: str) -> List['SoupTreeNode']:
        return [self._wrap(match) for match in self.element.select(pattern)]

    def iter_descendants(self) -> Iterator['SoupTreeNode']:
        for descendant in self.element.descendants:
            if isinstance(descendant, Tag):
                yield self._wrap(descendant)

    def _read_dimension(self, attribute: str) -> int:
        raw = self.element.get(attribute)
        if raw is None:
            return 0
        try:
            return int(round(float(raw)))
        except (TypeError, ValueError):
            logger.debug(f"Ignoring malformed {attribute}={raw!r} on <{self.element.name}>")
            return 0

    def _render_text(self) -> str:
        """Approximate innerText: block boundaries become line breaks"""
        parts: List[str] = []
        self._collect_text(self.element, parts)

        text = TextNormalizer.normalize_text(''.join(parts))
        return '\n'.join(TextNormalizer.split_lines(text))

    def _collect_text(self, element: Tag, parts: List[str]) -> None:
        for child in element.children:
            if isinstance(child, NavigableString):
                if isinstance(child, _NON_TEXT_STRINGS):
                    continue
                # Source newlines are plain whitespace in rendered text
                parts.append(str(child).replace('\n', ' '))
                continue

            if not isinstance(child, Tag) or self._is_hidden(child):
                continue

            if child.name == 'br':
                parts.append('\n')
                continue

            is_block = child.name in BLOCK_TAGS
            if is_block:
                parts.append('\n')
            self._collect_text(child, parts)
            if is_block:
                parts.append('\n')

    @staticmethod
    def _is_hidden(element: Tag) -> bool:
        if element.name in SKIPPED_TAGS:
            return True
        if element.has_attr('hidden') or element.has_attr(HIDDEN_ATTR):
            return True
        style = element.get('style')
        return bool(style and _DISPLAY_NONE.search(style))
