"""
CLI script to search book pages from the command line.

Usage:
    python scripts/run_search.py --subjects
    python scripts/run_search.py --titles history
    python scripts/run_search.py history "the fox"              # all books of the subject
    python scripts/run_search.py history fox --title A --title B
    python scripts/run_search.py history fox --json
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pagesearch.core import get_config, ConfigurationError, PageSearchError  # noqa: E402
from pagesearch.core.config_loader import reload_config  # noqa: E402
from pagesearch.api import SearchFacade  # noqa: E402
from pagesearch.database import init_schema  # noqa: E402
from pagesearch.search import QueryParser  # noqa: E402
from pagesearch.utils import make_snippet  # noqa: E402


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search a phrase across the pages of selected books"
    )

    parser.add_argument("subject", nargs="?", help="Subject to search within")
    parser.add_argument("query", nargs="?", help="Word or phrase to find")

    parser.add_argument(
        "--title",
        action="append",
        dest="titles",
        help="Book title to search (repeatable). Defaults to every book of the subject"
    )
    parser.add_argument("--subjects", action="store_true", help="List subjects and exit")
    parser.add_argument("--titles", dest="list_titles", metavar="SUBJECT", help="List titles of a subject and exit")
    parser.add_argument("--json", action="store_true", help="Print the raw response as JSON")
    parser.add_argument("--config", type=str, help="Path to custom config.json file")

    return parser.parse_args()


def _exit_on_error(response) -> None:
    if not response.ok:
        print(f"Error ({response.status}): {response.body['error']}")
        sys.exit(1)


def main():
    """Main entry point for the search CLI."""
    args = parse_args()

    try:
        config = reload_config(Path(args.config)) if args.config else get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    try:
        init_schema()
    except PageSearchError as e:
        print(f"Database unavailable: {e.message}")
        sys.exit(2)

    facade = SearchFacade()

    if args.subjects:
        response = facade.list_subjects()
        _exit_on_error(response)
        print("\n".join(response.body))
        return

    if args.list_titles:
        response = facade.list_titles(args.list_titles)
        _exit_on_error(response)
        print("\n".join(response.body))
        return

    if not args.subject or not args.query:
        print("Error: subject and query are required (see --help)")
        sys.exit(1)

    titles = args.titles
    if not titles:
        response = facade.list_titles(args.subject)
        _exit_on_error(response)
        titles = response.body
        if len(titles) > facade.max_titles:
            print(f"Note: searching the first {facade.max_titles} of {len(titles)} books")
            titles = titles[:facade.max_titles]

    response = facade.search({
        "selectedSubject": args.subject,
        "searchQuery": args.query,
        "pdfBookTitles": titles,
    })
    _exit_on_error(response)

    if args.json:
        print(json.dumps(response.body, ensure_ascii=False, indent=2))
        return

    pattern = QueryParser().whole_word_pattern(args.query.strip())
    results = response.body["results"]

    print(f"{response.body['total']} matching pages for \"{args.query}\" in {args.subject}")

    for title, matches in results.items():
        print(f"\n== {title} ({len(matches)})")
        for match in matches:
            snippet = make_snippet(match["text"], pattern, config.search.snippet_length)
            print(f"  p.{match['pageNum']}: {snippet}")


if __name__ == "__main__":
    main()
