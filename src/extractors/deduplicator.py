#!/usr/bin/env python3
"""
Deduplicator for Mention Extractor
"""

from typing import List, Set, Tuple

from models import MessageRecord

def deduplicate_records(records: List[MessageRecord]) -> List[MessageRecord]:
    """Keep the first record for each (sender, content) pair, preserving order"""
    seen: Set[Tuple[str, str]] = set()
    unique_records = []

    for record in records:
        if record.key not in seen:
            seen.add(record.key)
            unique_records.append(record)

    return unique_records
