"""
CLI script to import the PDF library into the page store.

Usage:
    python scripts/run_importer.py           # Import new books only
    python scripts/run_importer.py --reset   # Drop everything and re-import
    python scripts/run_importer.py --rebuild-index  # Rebuild the text index only
    python scripts/run_importer.py --config path/to/config.json
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pagesearch.core import get_config, ConfigurationError, PageSearchError  # noqa: E402
from pagesearch.core.config_loader import reload_config  # noqa: E402
from pagesearch.database import init_schema, rebuild_text_index  # noqa: E402
from pagesearch.ingestion import BookImporter  # noqa: E402


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Import subject folders of PDF books for page search"
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop all imported books and pages and import from scratch"
    )

    parser.add_argument(
        "--rebuild-index",
        action="store_true",
        help="Rebuild the full-text index from stored pages and exit"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to custom config.json file"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output"
    )

    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before --reset"
    )

    return parser.parse_args()


def progress_callback(current: int, total: int, title: str) -> None:
    """Print progress to console."""
    percent = (current / total) * 100 if total > 0 else 0
    bar_width = 30
    filled = int(bar_width * current / total) if total > 0 else 0
    bar = "=" * filled + "-" * (bar_width - filled)

    print(f"\r[{bar}] {percent:5.1f}% ({current}/{total}) {title[:40]:<40}", end="", flush=True)


def main():
    """Main entry point for the importer CLI."""
    args = parse_args()

    try:
        if args.config:
            config = reload_config(Path(args.config))
        else:
            config = get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    if args.rebuild_index:
        try:
            init_schema()
            rebuild_text_index()
        except PageSearchError as e:
            print(f"Rebuild failed: {e.message}")
            sys.exit(2)
        print("Text index rebuilt")
        return

    print("=" * 60)
    print("PDF Page Search - Importer")
    print("=" * 60)
    print(f"Library directory: {config.paths.data_directory}")
    print(f"Database path:     {config.paths.database_path}")
    print(f"Reset mode:        {args.reset}")
    print("=" * 60)

    if args.reset and not args.yes:
        response = input("This will DELETE all imported books and pages. Continue? [y/N] ")
        if response.lower() != "y":
            print("Aborted.")
            sys.exit(0)

    importer = BookImporter(
        reset=args.reset,
        progress_callback=None if args.quiet else progress_callback
    )

    print("\nStarting import...\n")

    try:
        stats = importer.run()
    except PageSearchError as e:
        print(f"\nImport failed: {e.message}")
        sys.exit(2)

    if not args.quiet:
        print("\n")

    print("=" * 60)
    print("Import Complete")
    print("=" * 60)
    print(f"Books scanned:     {stats.books_scanned:,}")
    print(f"Books imported:    {stats.books_imported:,}")
    print(f"Books skipped:     {stats.books_skipped:,}")
    print(f"Books failed:      {stats.books_failed:,}")
    print(f"Pages imported:    {stats.pages_imported:,}")
    print("=" * 60)

    if stats.errors:
        print(f"\nErrors ({len(stats.errors)}):")
        for error in stats.errors[:20]:
            print(f"  - {error}")
        if len(stats.errors) > 20:
            print(f"  ... and {len(stats.errors) - 20} more errors")

    sys.exit(1 if stats.books_failed > 0 else 0)


if __name__ == "__main__":
    main()
