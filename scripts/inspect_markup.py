"""Inspect stored markup and report what the editor keeps, unwraps or removes."""

from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path

import httpx
from bs4 import BeautifulSoup

from richedit.html_parser import parse_html
from richedit.html_utils import UNWANTED_TAGS
from richedit.serializer import serialize

SUPPORTED_TAGS = frozenset(
    {
        "a",
        "b",
        "blockquote",
        "br",
        "code",
        "del",
        "em",
        "h1",
        "h2",
        "h3",
        "i",
        "img",
        "li",
        "ol",
        "p",
        "s",
        "strike",
        "strong",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)
# Added by the lxml parser around fragments.
_WRAPPER_TAGS = frozenset({"html", "body"})


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect markup tags and what the editor drops.")
    parser.add_argument("--url", help="URL to fetch")
    parser.add_argument("--file", help="Local HTML file path")
    parser.add_argument(
        "--serialize", action="store_true", help="Print the markup the editor would store"
    )
    args = parser.parse_args()

    if not args.url and not args.file:
        parser.error("Provide --url or --file")

    html = load_html(url=args.url, file_path=args.file)
    soup = BeautifulSoup(html, "lxml")
    kept, unwrapped, removed = collect_stats(soup)

    print("Kept tags:")
    for name, count in kept.most_common():
        print(f"{name}: {count}")

    print("\nUnwrapped tags (text kept):")
    for name, count in unwrapped.most_common():
        print(f"{name}: {count}")

    print("\nRemoved tags (with content):")
    for name, count in removed.most_common():
        print(f"{name}: {count}")

    if args.serialize:
        print("\nSerialized:")
        print(serialize(parse_html(html)))


def load_html(*, url: str | None, file_path: str | None) -> str:
    if url:
        response = httpx.get(url, follow_redirects=True, timeout=15.0)
        response.raise_for_status()
        return response.text

    path = Path(file_path or "")
    if not path.is_file():
        raise FileNotFoundError(f"HTML file not found: {path}")
    return path.read_text(encoding="utf-8")


def collect_stats(soup: BeautifulSoup) -> tuple[Counter, Counter, Counter]:
    kept = Counter()
    unwrapped = Counter()
    removed = Counter()

    for tag in soup.find_all(True):
        if tag.name in _WRAPPER_TAGS:
            continue
        if tag.name in UNWANTED_TAGS:
            removed[tag.name] += 1
        elif tag.name in SUPPORTED_TAGS:
            kept[tag.name] += 1
        else:
            unwrapped[tag.name] += 1
    return kept, unwrapped, removed


if __name__ == "__main__":
    main()
