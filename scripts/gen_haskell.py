#!/usr/bin/env python3
"""
gen_haskell.py - Haskell binding generator entry point

Generates one Haskell module per namespace of an introspection catalog.

Usage:
    python scripts/gen_haskell.py CATALOG [-n NAMESPACE ...] [-o DIR] [-v]
"""

import argparse
import logging
import os
import sys

# Get paths
script_dir = os.path.dirname(os.path.abspath(__file__))
root_dir = os.path.abspath(os.path.join(script_dir, '..'))

# Add scripts directory to path
sys.path.insert(0, script_dir)

from gi_binding_gen import Catalog, GenerationError
from bindings import gnome


def configure_logging(verbosity: int):
    """Set up the gi_binding_gen logger: 0 -> WARNING, 1 -> INFO, 2+ -> DEBUG"""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger = logging.getLogger('gi_binding_gen')
    logger.setLevel(level)
    logger.addHandler(handler)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate Haskell bindings')
    parser.add_argument('catalog', help='Path to the catalog JSON file')
    parser.add_argument('-n', '--namespace', action='append', dest='namespaces',
                        help='Namespace to generate (repeatable, default: all)')
    parser.add_argument('-o', '--output', default=os.path.join(root_dir, 'gen/haskell'),
                        help='Output directory for the generated modules')
    parser.add_argument('-i', '--ignore', action='append', default=[],
                        help='Additional item to skip (repeatable)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log verbosity (-v, -vv)')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.verbose)

    catalog = Catalog.load(args.catalog)
    namespaces = args.namespaces or catalog.namespaces()
    gen = gnome.generator(catalog, args.ignore)

    try:
        gen.generate_all(namespaces, args.output)
    except GenerationError as e:
        print(f'  >> error: {e}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
