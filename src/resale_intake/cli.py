"""Command-line interface for resale-intake."""

import argparse
import logging
import sys

from resale_intake import __version__, compose_listing
from resale_intake.core import normalize_intake
from resale_intake.exceptions import IntakeError, OracleUnavailable
from resale_intake.normalization import NormalizationConfig
from resale_intake.vendors import VendorDirectory


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="resale-intake",
        description="Normalize free-text intake notes into a catalog-ready record",
    )
    parser.add_argument("text", nargs="?", help="Intake notes (reads stdin when omitted)")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--provider",
        choices=["gemini", "openai"],
        help="Extraction provider (default: INTAKE_PROVIDER env var, then gemini)",
    )
    parser.add_argument(
        "--api-key",
        help="Provider API key (default: GEMINI_API_KEY or OPENAI_API_KEY env var)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="version",
        version=f"resale-intake {__version__}",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    raw_input = args.text if args.text is not None else sys.stdin.read()
    config = NormalizationConfig.from_env()

    try:
        record = normalize_intake(
            raw_input,
            api_key=args.api_key,
            provider=args.provider,
            config=config,
            vendor_directory=VendorDirectory.from_env(),
        )
    except OracleUnavailable as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2 if e.retryable else 1
    except IntakeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(record.model_dump_json(indent=2, by_alias=True, exclude_none=True))
    else:
        _print_formatted(record, compose_listing(record, config.store_locations).title)

    return 0


def _print_formatted(record, title: str) -> None:
    """Print record in human-readable format."""
    print()
    print("  resale-intake")
    print()

    fields = [
        ("Title", title),
        ("Brand", record.brand),
        ("Item", record.item_name),
        ("Category", record.category_path),
        ("Size", record.size),
        ("Condition", f"{record.condition}/10" if record.condition else None),
        ("Cost", _format_money(record.cost)),
        ("Price", _format_money(record.price)),
        ("Location", record.location),
        ("Vendor", record.vendor),
        ("Consignment", _format_consignment(record)),
        ("Description", record.shopify_description),
    ]

    for label, value in fields:
        display = value if value else "-"
        print(f"  {label + ':':<14} {display}")

    if record.warnings:
        print()
        print(f"  Warnings: {', '.join(record.warnings)}")
    print()


def _format_money(value: str) -> str | None:
    return f"${value}" if value else None


def _format_consignment(record) -> str | None:
    if not record.is_consignment:
        return None
    return f"yes, {record.consignment_payout_pct}% payout"


if __name__ == "__main__":
    sys.exit(main())
