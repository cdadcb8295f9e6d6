"""
Command-line interface for the title matching engine.
Compare card / offer titles and de-duplicate title lists without the API.
"""

import argparse
import sys
from pathlib import Path
from typing import List

from engine.notifications import dedupe_titles
from engine.similarity import is_title_similar, levenshtein_distance, normalize_title


def load_titles(path: Path) -> List[str]:
    """
    Load titles from a text file, one per line.

    Blank lines are skipped.

    Returns:
        List of titles in file order
    """
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f if line.strip()]


def cmd_compare(args):
    """
    Print whether two titles refer to the same card or offer.

    Args:
        args: Parsed command-line arguments with fields:
            - title_a: first title
            - title_b: second title
    """
    similar = is_title_similar(args.title_a, args.title_b)
    distance = levenshtein_distance(normalize_title(args.title_a), normalize_title(args.title_b))

    print(f"\n=== Title Comparison ===\n")
    print(f"A: {args.title_a!r}")
    print(f"B: {args.title_b!r}")
    print(f"Edit distance (normalized): {distance}")
    print(f"\nSimilar: {'yes' if similar else 'no'}")
    print()

    # Exit status mirrors the verdict so the command can be scripted
    sys.exit(0 if similar else 1)


def cmd_distance(args):
    """Print the raw Levenshtein distance between two strings."""
    print(levenshtein_distance(args.a, args.b))


def cmd_dedupe(args):
    """
    De-duplicate a list of titles read from a file.

    Args:
        args: Parsed command-line arguments with fields:
            - file: path to a text file with one title per line
    """
    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found '{args.file}'.")
        sys.exit(1)

    titles = load_titles(path)
    if not titles:
        print("No titles found in the file.")
        return

    kept = dedupe_titles(titles)
    for title in kept:
        print(title)

    removed = len(titles) - len(kept)
    if removed:
        print(f"\n({removed} duplicate title(s) removed)", file=sys.stderr)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Card Title Matching CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compare command
    parser_compare = subparsers.add_parser("compare", help="Check whether two titles are similar")
    parser_compare.add_argument("title_a", help="First title")
    parser_compare.add_argument("title_b", help="Second title")

    # Distance command
    parser_distance = subparsers.add_parser("distance", help="Levenshtein distance between two strings")
    parser_distance.add_argument("a", help="First string")
    parser_distance.add_argument("b", help="Second string")

    # Dedupe command
    parser_dedupe = subparsers.add_parser("dedupe", help="Remove similar titles from a list")
    parser_dedupe.add_argument("file", help="Text file with one title per line")

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    if args.command == "compare":
        cmd_compare(args)
    elif args.command == "distance":
        cmd_distance(args)
    elif args.command == "dedupe":
        cmd_dedupe(args)


if __name__ == "__main__":
    main()
