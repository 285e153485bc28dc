#!/usr/bin/env python3

import sys
from cli.helpers import format_brl, resolve_id, truncate
from errors import StoreError
from services.staging import EDITABLE_FIELDS, STATE_EMPTY
from logger import get_logger

logger = get_logger()


def _resolve_pending_id(prefix, services):
    transaction_id = resolve_id(prefix, (t.id for t in services.staging.pending()))
    if not transaction_id:
        logger.error(f"No pending row with ID '{prefix}'.")
        sys.exit(1)
    return transaction_id


def _print_errors(validation):
    for transaction_id, row in validation.errors.items():
        for field_name, message in row.fields.items():
            logger.info(f"  {transaction_id[:8]}  {field_name}: {message}")


def cmd_list(args, services):
    """Show the pending batch with its per-row errors and summary."""
    batch = services.staging.pending()
    if services.staging.state == STATE_EMPTY:
        logger.info("No pending import. Use 'python -m cli transactions ingest' first.")
        return

    validation = services.staging.validate()

    logger.info(f"\nPending transactions ({len(batch)}):")
    logger.info("=" * 120)
    for t in batch:
        marker = "!" if t.id in validation.errors else " "
        logger.info(
            f"{marker} {t.id[:8]}  {t.posted_date:<10}  {t.owner:<8}  "
            f"{truncate(t.historic, 16):<16}  {truncate(t.description, 32):<32}  "
            f"{format_brl(t.amount):>16}  {format_brl(t.balance):>16}  "
            f"{t.category or ''}"
        )
    logger.info("-" * 120)

    summary = services.staging.summary()
    logger.info(f"Income:        {format_brl(summary.income)}")
    logger.info(f"Expenses:      {format_brl(summary.expenses)}")
    logger.info(f"Final balance: {format_brl(summary.final_balance)}")
    logger.info(f"Total rows:    {summary.total}")

    if validation.is_empty:
        logger.info("\nThe batch has no rows left. Cancel it or import a new statement.")
    elif validation.errors:
        logger.info(f"\n{len(validation.errors)} row(s) need fixing before commit:")
        _print_errors(validation)
    else:
        logger.info("\n✓ All rows are valid. Run 'python -m cli review commit' to save them.")


def cmd_edit(args, services):
    """Change one field of a pending row."""
    transaction_id = _resolve_pending_id(args.transaction_id, services)

    try:
        services.staging.edit(transaction_id, args.field, args.value)
    except StoreError as e:
        logger.error(f"Could not save pending batch: {e}")
        sys.exit(1)

    row = next(t for t in services.staging.pending() if t.id == transaction_id)
    errors = row.validation_errors()
    if args.field in errors:
        logger.warning(f"{args.field}: {errors[args.field]}")
    else:
        logger.info(f"✓ Updated {args.field} of {transaction_id[:8]}")


def cmd_remove(args, services):
    """Drop a pending row before commit."""
    transaction_id = _resolve_pending_id(args.transaction_id, services)

    try:
        services.staging.remove(transaction_id)
    except StoreError as e:
        logger.error(f"Could not save pending batch: {e}")
        sys.exit(1)

    logger.info(f"✓ Removed {transaction_id[:8]} from the pending batch")


def cmd_commit(args, services):
    """Save the pending batch to the ledger if every row is valid."""
    if services.staging.state == STATE_EMPTY:
        logger.info("Nothing to commit.")
        return

    try:
        result = services.staging.commit()
    except StoreError as e:
        logger.error(f"Could not save transactions, nothing was changed: {e}")
        sys.exit(1)

    if result.blocked:
        if result.validation.is_empty:
            logger.error("The pending batch is empty. Nothing to commit.")
        else:
            logger.error("Fix these fields before committing:")
            _print_errors(result.validation)
        sys.exit(1)

    logger.info(f"✓ {result.committed} transaction(s) saved to the ledger")


def cmd_cancel(args, services):
    """Discard the pending batch."""
    services.staging.cancel()
    logger.info("✓ Pending import discarded")


def setup_parser(subparsers):
    """Setup review subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "review",
        help="Verify a pending import",
        description="Check, fix and commit (or cancel) the pending import",
    )

    review_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available review commands",
        dest="subcommand",
        required=True,
    )

    list_parser = review_subparsers.add_parser(
        "list", help="Show pending rows, errors and totals"
    )
    list_parser.set_defaults(func=cmd_list)

    edit_parser = review_subparsers.add_parser("edit", help="Edit a pending row")
    edit_parser.add_argument("transaction_id", help="Row ID or unique prefix")
    edit_parser.add_argument("field", choices=EDITABLE_FIELDS, help="Field to change")
    edit_parser.add_argument("value", help="New value")
    edit_parser.set_defaults(func=cmd_edit)

    remove_parser = review_subparsers.add_parser(
        "remove", help="Remove a pending row"
    )
    remove_parser.add_argument("transaction_id", help="Row ID or unique prefix")
    remove_parser.set_defaults(func=cmd_remove)

    commit_parser = review_subparsers.add_parser(
        "commit", help="Save the pending rows to the ledger"
    )
    commit_parser.set_defaults(func=cmd_commit)

    cancel_parser = review_subparsers.add_parser(
        "cancel", help="Discard the pending import"
    )
    cancel_parser.set_defaults(func=cmd_cancel)
