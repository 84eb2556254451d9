#!/usr/bin/env python3
"""
Snapshot Loader for Mention Extractor
Reads a geometry-stamped page snapshot from disk or over HTTP.
"""

from pathlib import Path
from typing import Optional, Dict, Any
from urllib.parse import urlparse
import logging
import random
import time

import requests
from bs4 import BeautifulSoup

from extractors.tree_node import SoupTreeNode, WIDTH_ATTR
from extractors.common_extractor import SnapshotError

logger = logging.getLogger(__name__)

class SnapshotLoader:
    """Loads HTML snapshots and wraps them as TreeNode roots"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'mention-extractor/0.1',
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        })

    def load(self, source: str) -> SoupTreeNode:
        """
        Load a snapshot from a file path or http(s) URL

        Args:
            source: Path or URL of the snapshot

        Returns:
            Root SoupTreeNode of the parsed document

        Raises:
            SnapshotError: If the snapshot cannot be read
        """
        if self._is_url(source):
            html = self._fetch_html(source)
        else:
            html = self._read_file(source)

        return self.parse(html, source)

    def parse(self, html: str, source: Optional[str] = None) -> SoupTreeNode:
        if not html or not html.strip():
            raise SnapshotError("Snapshot is empty", source)

        soup = BeautifulSoup(html, 'html.parser')
        if soup.find(attrs={WIDTH_ATTR: True}) is None:
            logger.warning("Snapshot has no geometry attributes; timestamp anchor strategy cannot match containers")

        logger.debug(f"Parsed snapshot ({len(html)} characters)")
        return SoupTreeNode(soup)

    @staticmethod
    def _is_url(source: str) -> bool:
        return urlparse(source).scheme in ('http', 'https')

    def _read_file(self, source: str) -> str:
        path = Path(source).expanduser()
        try:
            return path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            raise SnapshotError(f"Cannot read snapshot {path}: {e}", source) from e

    def _fetch_html(self, url: str) -> str:
        """
        Fetch snapshot HTML with retries

        Args:
            url: URL to fetch

        Returns:
            HTML content string
        """
        max_retries = self.config.get('extraction', {}).get('max_retries', 3)
        timeout = self.config.get('extraction', {}).get('timeout', 30)
        last_error: Optional[Exception] = None

        for attempt in range(max_retries):
            try:
                logger.debug(f"Fetching snapshot (attempt {attempt + 1}/{max_retries})")
                response = self.session.get(url, timeout=timeout, allow_redirects=True)
                response.raise_for_status()

                logger.debug(f"Successfully fetched snapshot ({len(response.text)} characters)")
                return response.text

            except requests.HTTPError as e:
                last_error = e
                status = e.response.status_code if e.response is not None else None
                logger.warning(f"Attempt {attempt + 1} failed: {e}")
                if status is not None and status < 500 and status != 429:
                    break

            except requests.RequestException as e:
                last_error = e
                logger.warning(f"Attempt {attempt + 1} failed: {e}")

            if attempt < max_retries - 1:
                wait_time = (2 ** attempt) + random.uniform(0, 1)
                logger.debug(f"Waiting {wait_time:.1f} seconds before retry...")
                time.sleep(wait_time)

        raise SnapshotError(f"Failed to fetch snapshot from {url}: {last_error}", url)
