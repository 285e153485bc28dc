#!/usr/bin/env python3

import sys
import argparse
import gzip
import shutil
from pathlib import Path
from datetime import datetime
from categorization import auto_categorize
from cli.helpers import format_brl, resolve_id, truncate
from errors import MissingColumnsError, StatementError, StoreError
from ingestion import ingest
from models.category import CATEGORIES
from models.transaction import OWNERS, parse_number
from tools.transactions import filter_transactions, sort_transactions, split_by_owner
from logger import get_logger

logger = get_logger()


def _archive_statement(csv_path: Path, owner: str, config) -> None:
    """Keep a gzip copy of an imported statement in the archive directory."""
    config.archive_dir.mkdir(parents=True, exist_ok=True)

    # {owner}_{timestamp}_{original_filename}.gz
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    archive_path = config.archive_dir / f"{owner}_{timestamp}_{csv_path.name}.gz"

    with open(csv_path, "rb") as f_in:
        with gzip.open(archive_path, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)

    logger.info(f"Archived CSV to: {archive_path}")


def cmd_ingest(args, services):
    """Parse a statement CSV, categorize it and stage it for review.

    Args:
        args: Parsed command-line arguments with csv_file and owner
        services: Services container with the staging service
    """
    csv_path = Path(args.csv_file)
    if not csv_path.exists():
        logger.error(f"File not found: {args.csv_file}")
        sys.exit(1)

    logger.info(f"Importing statement for: {args.owner}")
    logger.info(f"CSV file: {args.csv_file}")
    logger.info("-" * 80)

    try:
        with open(csv_path, "r", encoding="utf-8") as f:
            transactions = ingest(f, args.owner)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read file {args.csv_file}: {e}")
        sys.exit(1)
    except MissingColumnsError as e:
        logger.error(str(e))
        logger.info("Expected: Data Lançamento, Histórico, Descrição, Valor, Saldo")
        sys.exit(1)
    except StatementError as e:
        logger.error(f"Error processing file: {e}")
        sys.exit(1)

    categorized = auto_categorize(transactions)

    if services.config.archive_enabled:
        try:
            _archive_statement(csv_path, args.owner, services.config)
        except OSError as e:
            logger.warning(f"Could not archive statement (import continues): {e}")

    try:
        count = services.staging.stage(categorized)
    except StoreError as e:
        logger.error(f"Could not save pending batch: {e}")
        sys.exit(1)

    logger.info(f"\n✓ {count} transaction(s) waiting for your confirmation")
    logger.info("Review them with 'python -m cli review list' before committing.")


def _print_table(transactions, title):
    logger.info(f"\n{title}")
    logger.info("=" * 120)
    for t in transactions:
        logger.info(
            f"{t.id[:8]}  {t.posted_date:<10}  {t.owner:<8}  "
            f"{truncate(t.historic, 16):<16}  {truncate(t.description, 32):<32}  "
            f"{format_brl(t.amount):>16}  {format_brl(t.balance):>16}  "
            f"{t.category or ''}"
        )
    logger.info("-" * 120)
    logger.info(f"Total transactions: {len(transactions)}")


def cmd_list(args, services):
    """List committed transactions with filters and sorting.

    Args:
        args: Parsed command-line arguments
        services: Services container with transactions service
    """
    if args.month:
        try:
            month = datetime.strptime(args.month, "%Y-%m")
        except ValueError:
            logger.error(f"Invalid month format: {args.month}. Expected YYYY-MM")
            sys.exit(1)
        transactions = services.transactions.get_transactions_by_month(
            month.year, month.month, owner=args.owner
        )
    elif args.owner:
        transactions = services.transactions.find_by_owner(args.owner)
    else:
        transactions = services.transactions.find_all()

    transactions = filter_transactions(
        transactions, historic=args.historic, description=args.description
    )
    transactions = sort_transactions(
        transactions, field=args.sort, descending=not args.asc
    )

    if not transactions:
        logger.info("No transactions found.")
        return

    if args.owner or args.view == "consolidated":
        title = f"Transactions - {args.owner}" if args.owner else "Consolidated view"
        _print_table(transactions, title)
    else:
        for owner, owned in split_by_owner(transactions).items():
            _print_table(owned, f"Transactions - {owner}")


def cmd_update(args, services):
    """Edit fields of a committed transaction.

    Args:
        args: Parsed command-line arguments with transaction_id and field options
        services: Services container with transactions service
    """
    transaction_id = resolve_id(
        args.transaction_id, (t.id for t in services.transactions.find_all())
    )
    if not transaction_id:
        logger.error(f"Transaction with ID '{args.transaction_id}' not found.")
        sys.exit(1)

    fields = {}
    if args.date is not None:
        fields["posted_date"] = args.date
    if args.historic is not None:
        fields["historic"] = args.historic
    if args.description is not None:
        fields["description"] = args.description
    if args.category is not None:
        fields["category"] = args.category
    for name in ("amount", "balance"):
        raw = getattr(args, name)
        if raw is None:
            continue
        value = parse_number(raw)
        if value is None:
            logger.error(f"{name.capitalize()} must be numeric, got '{raw}'")
            sys.exit(1)
        fields[name] = value

    if not fields:
        logger.error("Nothing to update. Pass at least one field option.")
        sys.exit(1)

    try:
        if not services.transactions.update(transaction_id, fields):
            logger.error("Failed to update transaction.")
            sys.exit(1)
    except ValueError as e:
        logger.error(f"Error updating transaction: {e}")
        sys.exit(1)
    except StoreError as e:
        logger.error(f"Could not save changes: {e}")
        sys.exit(1)

    logger.info("✓ Transaction updated successfully")


def cmd_delete(args, services):
    """Delete a committed transaction.

    Args:
        args: Parsed command-line arguments with transaction_id
        services: Services container with transactions service
    """
    transaction_id = resolve_id(
        args.transaction_id, (t.id for t in services.transactions.find_all())
    )
    transaction = services.transactions.find(transaction_id) if transaction_id else None
    if not transaction:
        logger.error(f"Transaction with ID '{args.transaction_id}' not found.")
        sys.exit(1)

    if not args.yes:
        response = input(
            f"Delete '{transaction.description}' ({format_brl(transaction.amount)})? (yes/no): "
        )
        if response.lower() != "yes":
            logger.info("Delete cancelled.")
            return

    try:
        services.transactions.delete(transaction.id)
    except StoreError as e:
        logger.error(f"Could not delete transaction: {e}")
        sys.exit(1)

    logger.info("✓ Transaction deleted")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Import, browse and edit transactions",
        description="Import statements and manage committed transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions ingest
    ingest_parser = transactions_subparsers.add_parser(
        "ingest",
        help="Import a bank statement CSV for review",
        epilog="""
Examples:
  python -m cli transactions ingest extrato.csv --owner Daniela
  python -m cli transactions ingest downloads/extrato_maio.csv --owner Giovani

Imported transactions are not saved right away: they are categorized and
kept as a pending batch. Use 'python -m cli review' to check and commit them.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ingest_parser.add_argument("csv_file", help="Path to the CSV file to import")
    ingest_parser.add_argument(
        "--owner",
        required=True,
        choices=OWNERS,
        help="Account holder the statement belongs to",
    )
    ingest_parser.set_defaults(func=cmd_ingest)

    # transactions list
    list_parser = transactions_subparsers.add_parser(
        "list",
        help="List committed transactions",
        description="Browse committed transactions per owner or consolidated",
    )
    list_parser.add_argument("--owner", choices=OWNERS, help="Only this owner")
    list_parser.add_argument(
        "--view",
        choices=("separate", "consolidated"),
        default="separate",
        help="One table per owner (default) or a single consolidated table",
    )
    list_parser.add_argument("--month", help="Only this month, YYYY-MM")
    list_parser.add_argument("--historic", help="Filter by historic (substring)")
    list_parser.add_argument("--description", help="Filter by description (substring)")
    list_parser.add_argument(
        "--sort",
        choices=("date", "amount"),
        default="date",
        help="Sort by date (default) or absolute amount",
    )
    list_parser.add_argument(
        "--asc", action="store_true", help="Ascending order (default: descending)"
    )
    list_parser.set_defaults(func=cmd_list)

    # transactions update
    update_parser = transactions_subparsers.add_parser(
        "update",
        help="Edit a committed transaction",
        description="Change one or more fields of a committed transaction",
    )
    update_parser.add_argument("transaction_id", help="Transaction ID or unique prefix")
    update_parser.add_argument("--date", help="Posted date, YYYY-MM-DD")
    update_parser.add_argument("--historic", help="Historic label")
    update_parser.add_argument("--description", help="Description")
    update_parser.add_argument("--amount", help="Signed amount, e.g. -45.90")
    update_parser.add_argument("--balance", help="Balance, e.g. 1200.50")
    update_parser.add_argument("--category", choices=CATEGORIES, help="Category")
    update_parser.set_defaults(func=cmd_update)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a committed transaction"
    )
    delete_parser.add_argument("transaction_id", help="Transaction ID or unique prefix")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)
