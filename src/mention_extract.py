#!/usr/bin/env python3
"""
Mention Extractor CLI
Extract structured mention messages (sender, group, text) from a rendered page snapshot.
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
import logging

from config_manager import ConfigManager
from extractors.snapshot_loader import SnapshotLoader
from extractors.mention_extractor import MentionExtractor
from extractors.common_extractor import ExtractionError
from output_formatter import ScanResultFormatter
from scan_client import ScanInvoker, ExtractionErrorHandler

VERSION = "0.1.0"

def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract mention messages from a rendered chat page snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mention_extract snapshot.html
  mention_extract https://snapshots.example.com/mentions.html --format markdown
  mention_extract https://app.ringcentral.com/mentions --live --storage-state auth.json
        """
    )

    parser.add_argument(
        "source",
        help="Snapshot file path or URL (with --live: page URL to capture)"
    )

    parser.add_argument(
        "--live",
        action="store_true",
        help="Render SOURCE in Chromium and capture geometry before scanning"
    )

    parser.add_argument(
        "--storage-state",
        help="Playwright storage state file with a signed-in session (used with --live)"
    )

    parser.add_argument(
        "--output", "-o",
        help="Output directory for the result file (default: print to stdout)"
    )

    parser.add_argument(
        "--format", "-f",
        choices=ScanResultFormatter.FORMATS,
        help="Output format (default: from config)"
    )

    parser.add_argument(
        "--config", "-c",
        help="Configuration file path (default: ~/.config/mention_extractor/config.yaml)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        help="Seconds to wait for the scan reply (default: from config)"
    )

    parser.add_argument(
        "--extract-time",
        action="store_true",
        help="Add a 'time' field taken from the message timestamp"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Mention Extractor v{VERSION}"
    )

    return parser

def load_root(args, config):
    """Load the document root from a snapshot or a live capture"""
    loader = SnapshotLoader(config)
    if args.live:
        from extractors.page_capture import capture_page
        html = capture_page(args.source, config, storage_state=args.storage_state)
        return loader.parse(html, args.source)
    return loader.load(args.source)

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        # Load configuration
        logger.info("Loading configuration...")
        config_manager = ConfigManager(args.config)
        config = config_manager.load_config()

        if args.extract_time:
            config.setdefault('extraction', {})['extract_time'] = True

        timeout = args.timeout if args.timeout is not None else config_manager.get_nested_value(config, 'extraction.scan_timeout', 5)

        # Load page
        logger.info(f"Loading page from {args.source}...")
        root = load_root(args, config)

        # Scan
        extractor = MentionExtractor(config)
        response = ScanInvoker(extractor, timeout).invoke(root, args.source)

        if response.count == 0:
            raise ExtractionErrorHandler.no_messages_error(args.source)

        logger.info(f"Extracted {response.count} messages")
        logger.debug(f"Scan stats: {extractor.get_scan_stats()}")

        # Format output
        formatter = ScanResultFormatter(config, args.format)
        content = formatter.format_response(response)

        if not args.output:
            print(content)
            return 0

        output_dir = Path(args.output).expanduser()
        output_dir.mkdir(parents=True, exist_ok=True)

        filename_template = config.get('output', {}).get('filename_template',
                                                       'mentions_{timestamp}.{ext}')
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        output_path = output_dir / filename_template.format(timestamp=timestamp, ext=formatter.extension)

        logger.info(f"Saving messages to {output_path}")
        output_path.write_text(content, encoding='utf-8')

        print(f"✅ Successfully extracted messages!")
        print(f"📁 Saved to: {output_path}")
        print(f"📊 Messages: {response.count}")

        return 0

    except ExtractionError as e:
        print(ExtractionErrorHandler.get_user_friendly_message(e), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

if __name__ == "__main__":
    sys.exit(main())
