#!/usr/bin/env python3
"""
Output Formatter for Mention Extractor
Formats scan responses as JSON (the scan reply shape) or a Markdown digest.
"""

import json
from typing import Dict, Any, List
import logging

from models import ScanResponse, MessageRecord
from extractors.text_normalizer import TextNormalizer

logger = logging.getLogger(__name__)

class ScanResultFormatter:
    """Formats scan responses for files or stdout"""

    FORMATS = ('json', 'markdown')
    EXTENSIONS = {'json': 'json', 'markdown': 'md'}

    def __init__(self, config: Dict[str, Any], output_format: str = None):
        self.config = config
        self.output_format = (output_format or config.get('output', {}).get('format', 'json')).lower()
        if self.output_format not in self.FORMATS:
            raise ValueError(f"Unsupported format: {self.output_format}. Supported formats: {', '.join(self.FORMATS)}")

    @property
    def extension(self) -> str:
        return self.EXTENSIONS[self.output_format]

    def format_response(self, response: ScanResponse) -> str:
        if self.output_format == 'markdown':
            return self.format_markdown(response)
        return self.format_json(response)

    def format_json(self, response: ScanResponse) -> str:
        indent = self.config.get('output', {}).get('indent', 2)
        return json.dumps(response.to_dict(), ensure_ascii=False, indent=indent)

    def format_markdown(self, response: ScanResponse) -> str:
        """
        Format records grouped by context

        Args:
            response: ScanResponse to format

        Returns:
            Markdown string
        """
        logger.info(f"Formatting {response.count} messages as Markdown")

        lines = [
            "## Mentions",
            "",
            f"**Scanned:** {response.scanned_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"**Messages:** {response.count}",
            f"**Strategy:** {response.source.value}",
        ]

        for context in response.get_contexts():
            lines.append("")
            lines.append(f"### {TextNormalizer.normalize_text(context)}")
            lines.append("")
            for record in response.data:
                if record.context == context:
                    lines.append(self._format_record(record))

        return "\n".join(lines) + "\n"

    def _format_record(self, record: MessageRecord) -> str:
        sender = TextNormalizer.normalize_text(record.sender)
        content = ' '.join(TextNormalizer.split_lines(TextNormalizer.normalize_text(record.content)))

        subtext: List[str] = []
        if 'time' in record.extras:
            subtext.append(str(record.extras['time']))

        line = f"- **{sender}**: {content}"
        if subtext:
            line += f" _({' | '.join(subtext)})_"
        return line
