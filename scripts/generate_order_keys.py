#!/usr/bin/env python3
"""
Generate Order Keys - Developer Tool

Prints fractional-index order keys for hand-repairing or inspecting the
ordering of lists and cards.

Usage:
    # One key after 'a0'
    python3 scripts/generate_order_keys.py --after a0

    # Five keys between two existing siblings
    python3 scripts/generate_order_keys.py --after a0 --before a1 -n 5

    # Fresh keys for renumbering a group of 12 siblings
    python3 scripts/generate_order_keys.py --rebalance 12

    # Check stored keys are valid and strictly increasing
    python3 scripts/generate_order_keys.py --check a0 a0V a1
"""

import os
import sys
import argparse
import logging
from typing import List, Optional

from dotenv import load_dotenv

# Add parent directory to path so we can import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fractional_indexing import (
    FractionalIndexError,
    generate_n_keys_between,
    rebalance_keys,
    validate_order_key,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Generate or check fractional-index order keys'
    )

    parser.add_argument(
        '--after',
        metavar='KEY',
        help='Existing key the new keys must sort after'
    )

    parser.add_argument(
        '--before',
        metavar='KEY',
        help='Existing key the new keys must sort before'
    )

    parser.add_argument(
        '--count',
        '-n',
        type=int,
        default=1,
        help='Number of keys to generate (default: 1)'
    )

    parser.add_argument(
        '--rebalance',
        type=int,
        metavar='N',
        help='Print N fresh keys for renumbering a whole sibling group'
    )

    parser.add_argument(
        '--check',
        nargs='+',
        metavar='KEY',
        help='Validate keys and confirm they are in strictly increasing order'
    )

    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def check_keys(keys: List[str]) -> bool:
    """
    Validate each key and the order between neighbours.

    Returns:
        True if every key is valid and each sorts strictly after the previous one
    """
    ok = True
    previous = None
    for key in keys:
        try:
            validate_order_key(key)
        except FractionalIndexError as e:
            print(f"INVALID    {key}: {e}")
            ok = False
            previous = None
            continue

        if previous is not None and previous >= key:
            print(f"MISORDERED {key}: not after {previous}")
            ok = False
        else:
            print(f"OK         {key}")
        previous = key
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    """Run the tool, returning the process exit status."""
    load_dotenv()

    args = build_parser().parse_args(argv)

    # Configure logging
    if args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, os.environ.get('ORDER_KEY_LOG_LEVEL', 'INFO').upper(), None)
        if not isinstance(log_level, int):
            log_level = logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.check:
        return 0 if check_keys(args.check) else 1

    try:
        if args.rebalance is not None:
            keys = rebalance_keys(args.rebalance)
        else:
            keys = generate_n_keys_between(args.after, args.before, args.count)
    except ValueError as e:
        logger.error(f"Could not generate order keys: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Generated {len(keys)} keys between {args.after!r} and {args.before!r}")
    for key in keys:
        print(key)
    return 0


if __name__ == '__main__':
    sys.exit(main())
