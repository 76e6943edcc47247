import argparse
import json
import logging
import sys

from packages.categorization.rules import Category
from packages.ingestion_engine.import_statement import ImportResult, import_statement

logger = logging.getLogger(__name__)


def load_categories(path: str) -> list[Category]:
    """Read a JSON array of {id, name, type, keywords} objects."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError("Categories file must contain a JSON array")
    return [Category.from_mapping(row) for row in raw]


def format_report(result: ImportResult) -> str:
    period = "-"
    if result.period_start or result.period_end:
        start = result.period_start.isoformat() if result.period_start else "?"
        end = result.period_end.isoformat() if result.period_end else "?"
        period = f"{start} .. {end}"

    lines = [
        f"Bank:     {result.bank_name or '-'}",
        f"Account:  {result.account_number or '-'}",
        f"Period:   {period}",
        f"Imported: {result.count} ({result.skipped} skipped)",
        "",
    ]

    if result.count:
        lines.append(result.to_dataframe().to_string(index=False))
        lines.append("")

    summary = result.summary
    lines.append(f"Credits: {summary.total_credits:.2f}")
    lines.append(f"Debits:  {summary.total_debits:.2f}")
    lines.append(f"Balance: {summary.balance:.2f}")
    for row in summary.by_category:
        lines.append(f"  {row['name']} ({row['direction']}): {row['total']:.2f} [{row['count']}]")

    return "\n".join(lines)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Import an OFX statement and classify its transactions"
    )
    parser.add_argument("statement", help="Path to the .ofx file")
    parser.add_argument("--categories", help="JSON file with the category list")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
    )

    try:
        with open(args.statement, "rb") as f:
            content = f.read()
    except OSError as e:
        logger.error(f"Could not read statement {args.statement}: {e}")
        return 1

    categories: list[Category] = []
    if args.categories:
        try:
            categories = load_categories(args.categories)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Invalid categories file {args.categories}: {e}")
            return 1

    result = import_statement(content, categories)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
