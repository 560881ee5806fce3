#!/usr/bin/env python3
"""
Index build check.
Builds the similarity index from the configured catalog and provider,
reports skipped entries and runs a few sample queries against it.
"""

import argparse
import sys
from pathlib import Path

# Add the parent directory to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from snap_api.core.config import get_catalog, get_embedding_provider
from snap_api.core.errors import IndexInitializationError, SnapError
from snap_api.vector.index import SimilarityIndex

SAMPLE_QUERIES = [
    ["smug", "confused", "detective"],
    ["hungry", "comical"],
    ["thumbs up"],
]


def main():
    """Build the index and print a short report."""
    parser = argparse.ArgumentParser(description="Build the similarity index and run sample queries")
    parser.add_argument("words", nargs="*", help="Query words (default: built-in samples)")
    args = parser.parse_args()

    catalog = get_catalog()
    print(f"Building index from {catalog!r}...")

    index = SimilarityIndex(provider_factory=get_embedding_provider, catalog=catalog)
    try:
        report = index.initialize()
    except IndexInitializationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"✓ Indexed {report.indexed} entries (dimension {report.dimension}) in {report.duration_ms}ms")
    if report.skipped:
        print(f"WARNING: {len(report.skipped)} entries skipped:")
        for identifier in report.skipped:
            print(f"  - {identifier}: {report.skip_reasons.get(identifier, 'unknown')}")

    queries = [args.words] if args.words else SAMPLE_QUERIES
    for words in queries:
        try:
            result = index.find_best_match(words)
            print(f"  {', '.join(words)} -> {result.identifier} ({result.score:.3f})")
        except SnapError as e:
            print(f"  {', '.join(words)} -> ERROR: {e}")

    print("Index check complete!")


if __name__ == "__main__":
    main()
