#!/usr/bin/env python3
"""
Live page capture for Mention Extractor
Renders a page in Chromium, stamps every element's box size onto the DOM and
returns the serialized HTML for SnapshotLoader.parse().
"""

import logging
from typing import Optional, Dict, Any

from playwright.sync_api import sync_playwright, Error as PlaywrightError

from extractors.tree_node import WIDTH_ATTR, HEIGHT_ATTR, HIDDEN_ATTR
from extractors.common_extractor import SnapshotError

logger = logging.getLogger(__name__)

GEOMETRY_STAMP_JS = """
(attrs) => {
    const [widthAttr, heightAttr, hiddenAttr] = attrs;
    let stamped = 0;
    for (const el of document.querySelectorAll('*')) {
        const rect = el.getBoundingClientRect();
        el.setAttribute(widthAttr, Math.round(rect.width));
        el.setAttribute(heightAttr, Math.round(rect.height));
        const style = window.getComputedStyle(el);
        if (style.display === 'none' || style.visibility === 'hidden') {
            el.setAttribute(hiddenAttr, '1');
        }
        stamped++;
    }
    return stamped;
}
"""

def capture_page(url: str, config: Optional[Dict[str, Any]] = None,
                 storage_state: Optional[str] = None) -> str:
    """
    Capture a geometry-stamped snapshot of a live page

    Args:
        url: Page to open
        config: Configuration dictionary, reads the ``capture`` section
        storage_state: Optional Playwright storage state file for a signed-in session

    Returns:
        Serialized HTML with data-rx-width / data-rx-height on every element
    """
    capture = (config or {}).get('capture', {}) or {}
    wait_ms = int(capture.get('wait_ms', 1500))
    headless = bool(capture.get('headless', True))
    timeout_ms = int((config or {}).get('extraction', {}).get('timeout', 30)) * 1000

    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=headless)
            try:
                context = browser.new_context(
                    viewport={'width': 1440, 'height': 900},
                    storage_state=storage_state,
                )
                page = context.new_page()
                logger.info(f"Opening {url}")
                page.goto(url, wait_until='domcontentloaded', timeout=timeout_ms)
                page.wait_for_timeout(wait_ms)

                stamped = page.evaluate(GEOMETRY_STAMP_JS, [WIDTH_ATTR, HEIGHT_ATTR, HIDDEN_ATTR])
                logger.debug(f"Stamped geometry on {stamped} elements")
                return page.content()
            finally:
                browser.close()
    except PlaywrightError as e:
        raise SnapshotError(f"Live capture of {url} failed: {e}", url) from e
