#!/usr/bin/env python3
"""
Text Normalizer for Mention Extractor
Normalizes rendered text and splits it into visual lines.
"""

import re
import unicodedata
import logging
from typing import List, Union

logger = logging.getLogger(__name__)

COLON_CHARS = ':\uff1a'

class TextNormalizer:
    """Text normalization for rendered page text"""

    # Characters that render as nothing or as a plain space
    REPLACEMENTS = {
        '\u200b': '',  # zero-width space
        '\u200c': '',  # zero-width non-joiner
        '\u200d': '',  # zero-width joiner
        '\u2060': '',  # word joiner
        '\ufeff': '',  # byte order mark
        '\u00a0': ' ', # non-breaking space
    }

    @staticmethod
    def normalize_text(text: Union[str, bytes, None]) -> str:
        """
        Normalize text while keeping line breaks

        Args:
            text: Input text, bytes are decoded as UTF-8

        Returns:
            NFC-normalized string with collapsed horizontal whitespace
        """
        if not text:
            return ""

        if isinstance(text, bytes):
            text = text.decode('utf-8', errors='replace')

        text = str(text).replace('\x00', '')

        try:
            text = unicodedata.normalize('NFC', text)
        except Exception as e:
            logger.debug(f"Unicode normalization failed: {e}")

        for old, new in TextNormalizer.REPLACEMENTS.items():
            text = text.replace(old, new)

        # Drop control characters except line breaks and tabs
        text = ''.join(char for char in text
                       if unicodedata.category(char)[0] != 'C' or char in '\n\r\t')

        text = re.sub(r'\r\n?', '\n', text)
        text = re.sub('[\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]', ' ', text)
        text = re.sub(r'[ \t]+', ' ', text)

        return text.strip()

    @staticmethod
    def split_lines(text: str) -> List[str]:
        """Split on line breaks, trim each line and drop empty ones"""
        if not text:
            return []
        return [line.strip() for line in text.split('\n') if line.strip()]

    @staticmethod
    def strip_colons(text: str) -> str:
        """Remove ASCII and full-width colons"""
        return ''.join(char for char in text if char not in COLON_CHARS)

    @staticmethod
    def truncate(text: str, limit: int) -> str:
        return text[:limit] if len(text) > limit else text
