#!/usr/bin/env python3
"""
Generate Haskell modules for every namespace of a catalog.

Each namespace is generated in its own process; a failing namespace does
not stop the others.

Usage:
    python scripts/gen_all.py CATALOG [-o DIR] [-j N]  # N parallel jobs (default: CPU count)
"""

import argparse
import os
import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent.resolve()
PROJECT_ROOT = SCRIPT_DIR.parent

sys.path.insert(0, str(SCRIPT_DIR))

from gi_binding_gen import Catalog, GenerationError
from bindings import gnome


def run_namespace(args):
    """Generate a single namespace. Returns (namespace, success, output)."""
    catalog_path, namespace, output_root = args
    catalog = Catalog.load(catalog_path)
    gen = gnome.generator(catalog)
    try:
        path = gen.write_module(namespace, output_root)
    except GenerationError as e:
        return namespace, False, f'error: {e}'
    return namespace, True, path


def main():
    parser = argparse.ArgumentParser(description='Generate Haskell modules for all namespaces')
    parser.add_argument('catalog', help='Path to the catalog JSON file')
    parser.add_argument('-o', '--output', default=str(PROJECT_ROOT / 'gen' / 'haskell'),
                        help='Output directory for the generated modules')
    parser.add_argument('-j', '--jobs', type=int, default=os.cpu_count(),
                        help=f'Number of parallel jobs (default: {os.cpu_count()})')
    args = parser.parse_args()

    namespaces = Catalog.load(args.catalog).namespaces()
    os.makedirs(args.output, exist_ok=True)

    print(f'Generating {len(namespaces)} modules with {args.jobs} parallel jobs...')

    success_count = 0
    fail_count = 0
    failed = []

    tasks = [(args.catalog, ns, args.output) for ns in namespaces]
    with ProcessPoolExecutor(max_workers=args.jobs) as executor:
        futures = {executor.submit(run_namespace, task): task[1] for task in tasks}

        for future in as_completed(futures):
            namespace, success, output = future.result()
            if success:
                success_count += 1
                print(f'  [OK] {namespace}')
            else:
                fail_count += 1
                failed.append(namespace)
                print(f'  [FAIL] {namespace}')
                print(f'       {output}')

    print(f'\nResults: {success_count} succeeded, {fail_count} failed')
    if failed:
        print(f"Failed: {', '.join(failed)}")

    return 0 if fail_count == 0 else 1


if __name__ == '__main__':
    sys.exit(main())
