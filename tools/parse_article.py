# tools/parse_article.py
"""
Extract an article from a URL or a saved HTML file and print it.

    python tools/parse_article.py https://example.com/story
    python tools/parse_article.py output.html --json
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from referent.errors import ExtractionError
from referent.extractor import extract_article, extract_from_html


def load_article(source, timeout=None):
    p = Path(source)
    if p.is_file():
        return extract_from_html(p.read_text(encoding="utf-8", errors="replace"))
    return extract_article(source, timeout=timeout)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Extract title, date and text of an article.")
    parser.add_argument("source", help="article URL or path to a saved HTML file")
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("--timeout", type=float, default=None, help="fetch timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        article = load_article(args.source, timeout=args.timeout)
    except ExtractionError as e:
        if args.json:
            print(json.dumps({"error": e.to_dict()}, ensure_ascii=False, indent=2))
        else:
            print(f"{e.code.value}: {e.message}", file=sys.stderr)
            if e.details:
                print(e.details, file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(article.to_dict(), ensure_ascii=False, indent=2))
        return 0

    print("=== TITLE ===\n")
    print(article.title or "")
    print("\n=== DATE ===\n")
    print(article.date or "")
    print("\n=== CONTENT ===\n")
    print(article.content)
    return 0


if __name__ == "__main__":
    sys.exit(main())
