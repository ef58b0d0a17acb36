#!/usr/bin/env python
"""
Keyword Search Job

Runs one search across all configured sources and prints the same JSON
the /api/search endpoint returns.

Usage:
    python scripts/search_job.py bluetongue "foot and mouth"
    python scripts/search_job.py --sources fwi,sf --no-summaries sheep

Exit codes:
    0 - Success (including zero articles)
    1 - Failure
"""

import argparse
import json
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from livestock_news.services.aggregator import build_adapters, run_search
from livestock_news.services.sources import get_source, get_sources
from livestock_news.services.text_matcher import clean_keywords

# Configure logging (stderr, so stdout stays valid JSON)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)
logging.getLogger('httpx').setLevel(logging.WARNING)
logger = logging.getLogger('search_job')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Search livestock news sources by keyword")
    parser.add_argument('keywords', nargs='+', help="Keywords to match (case-insensitive)")
    parser.add_argument('--sources', help="Comma-separated source tags (default: all)")
    parser.add_argument('--no-summaries', action='store_true', help="Skip fetching article pages for summaries")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for a one-off search."""
    args = parse_args(argv)

    try:
        keywords = clean_keywords(args.keywords)
    except ValueError as e:
        logger.error(str(e))
        return 1

    sources = get_sources()
    if args.sources:
        tags = [tag.strip() for tag in args.sources.split(',') if tag.strip()]
        sources = [get_source(tag) for tag in tags]
        unknown = [tag for tag, source in zip(tags, sources) if source is None]
        if unknown:
            logger.error(f"Unknown source tags: {', '.join(unknown)}")
            return 1

    adapter_options = {'enrich_summaries': False} if args.no_summaries else {}

    try:
        result = run_search(keywords, adapters=build_adapters(sources, **adapter_options))
    except Exception as e:
        logger.error(f"SEARCH FAILED: {e}", exc_info=True)
        return 1

    stats = result.stats
    logger.info("=" * 60)
    logger.info(f"Sources:     {stats.get('sources_succeeded', 0)}/{stats.get('sources_total', 0)} ok, {stats.get('sources_timed_out', 0)} timed out")
    logger.info(f"Candidates:  {stats.get('candidates', 0)}")
    logger.info(f"Duplicates:  {stats.get('duplicates_removed', 0)}")
    logger.info(f"Articles:    {result.count}")
    logger.info(f"Duration:    {stats.get('duration_seconds', 0):.1f}s")
    logger.info("=" * 60)

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
