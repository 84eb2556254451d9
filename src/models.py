#!/usr/bin/env python3
"""
Data models for Mention Extractor
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum

DEFAULT_SENDER = "Unknown Sender"
DEFAULT_CONTEXT = "Direct Message"
MAX_CONTENT_LENGTH = 500

class CandidateSource(Enum):
    """Strategy that produced a candidate container"""
    SELECTOR = "selector"
    ANCHOR = "anchor"
    NONE = "none"

@dataclass
class MessageRecord:
    """Represents a single extracted message"""
    sender: str
    content: str
    context: str = DEFAULT_CONTEXT
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.content or not self.content.strip():
            raise ValueError("MessageRecord requires non-empty content")

    @property
    def key(self) -> tuple:
        """Identity used for deduplication"""
        return (self.sender, self.content)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'sender': self.sender,
            'context': self.context,
            'content': self.content,
        }
        data.update(self.extras)
        return data

@dataclass
class ScanResponse:
    """Result of a single scan, shaped like the scan reply sent to a caller"""
    data: List[MessageRecord]
    success: bool = True
    source: CandidateSource = CandidateSource.NONE
    scanned_at: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.source, str):
            self.source = CandidateSource(self.source.lower())
        if self.scanned_at is None:
            self.scanned_at = datetime.now()

    @property
    def count(self) -> int:
        return len(self.data)

    def get_contexts(self) -> List[str]:
        """Get distinct contexts in first-seen order"""
        contexts = []
        for record in self.data:
            if record.context not in contexts:
                contexts.append(record.context)
        return contexts

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'count': self.count,
            'data': [record.to_dict() for record in self.data],
        }
