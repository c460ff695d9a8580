"""
Command line interface for SchoolRadar.

Two subcommands are exposed:

* ``search`` - ask the configured model for fictional schools near an
  address, print them and optionally export them to CSV.
* ``normalize`` - run the reply normalizer over a saved model reply.
  Useful when tuning the prompt or investigating a bad response.

Configuration (provider, API key, model) is resolved once here via
:func:`schoolflow.config.load_settings` and passed down explicitly.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List

from .config import load_settings
from .errors import SchoolDataError
from .normalize.parse_response import normalize
from .normalize.schema import SchoolRecord
from .normalize.write_csv import CSV_NOT_AVAILABLE, to_csv
from .search.llm_providers import build_provider
from .session import SearchSession

logger = logging.getLogger("schoolflow.cli")


def _print_schools(schools: List[SchoolRecord], address: str) -> None:
    print(f"Fictional schools near {address}:")
    print()
    for i, school in enumerate(schools):
        print(f"{i+1:02d}. {school.name} - {school.type} ({school.student_count} students)")
        print(f"   Address: {school.address}")
        print(f"   Phone: {school.phone_number or CSV_NOT_AVAILABLE}")
        print(f"   Principal: {school.principal_name or CSV_NOT_AVAILABLE}"
              f" <{school.manager_email or CSV_NOT_AVAILABLE}>")
        print(f"   Assistant: {school.assistant_name or CSV_NOT_AVAILABLE}"
              f" <{school.assistant_email or CSV_NOT_AVAILABLE}>")
        print()


def cmd_search(args: argparse.Namespace) -> int:
    """Search for schools near an address and optionally export CSV."""
    try:
        settings = load_settings(args.config, provider=args.provider)
        if args.strict:
            settings = replace(settings, strict=True)
        provider = build_provider(settings)
    except SchoolDataError as exc:
        logger.error("%s", exc)
        return 1

    session = SearchSession(
        provider,
        strict=settings.strict,
        min_count=settings.min_count,
        max_count=settings.max_count,
    )
    schools = session.search(args.address)
    if session.error:
        logger.error("%s", session.error)
        return 1
    if not schools:
        logger.warning("The AI returned no valid schools for %s", args.address)

    if args.json:
        print(json.dumps([school.to_dict() for school in schools], indent=2))
    else:
        _print_schools(schools, args.address)

    if args.out is not None:
        path = session.export(args.out or None, directory=settings.output_dir)
        if session.error:
            logger.error("%s", session.error)
            return 1
        logger.info("Exported %d schools to %s", len(schools), path)
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    """Normalize a saved model reply and print JSON or CSV."""
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            raw_text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Could not read %s: %s", args.file, exc)
        return 1
    try:
        schools = normalize(raw_text, strict=args.strict)
    except SchoolDataError as exc:
        logger.error("%s", exc)
        return 1
    if args.csv:
        print(to_csv(schools))
    else:
        print(json.dumps([school.to_dict() for school in schools], indent=2))
    logger.info("Normalized %d schools from %s", len(schools), args.file)
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="schoolflow", description="SchoolRadar CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Search
    search_cmd = subparsers.add_parser("search", help="Find fictional schools near an address")
    search_cmd.add_argument("--address", required=True, help="Street address to search around")
    search_cmd.add_argument(
        "--out",
        nargs="?",
        const="",
        default=None,
        help="Export to CSV; without a value the file is named after the address",
    )
    search_cmd.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    search_cmd.add_argument("--strict", action="store_true", help="Fail on the first invalid school entry")
    search_cmd.add_argument("--provider", choices=["gemini", "openai", "placeholder"], help="LLM provider")
    search_cmd.add_argument("--config", help="YAML config file")
    search_cmd.set_defaults(func=cmd_search)

    # Normalize
    norm_cmd = subparsers.add_parser("normalize", help="Normalize a saved model reply")
    norm_cmd.add_argument("--file", required=True, help="Path to the raw reply text")
    norm_cmd.add_argument("--strict", action="store_true", help="Fail on the first invalid school entry")
    norm_cmd.add_argument("--csv", action="store_true", help="Print CSV instead of JSON")
    norm_cmd.set_defaults(func=cmd_normalize)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
