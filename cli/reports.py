#!/usr/bin/env python3

import sys
from datetime import date, datetime
from cli.helpers import format_brl, format_percent, truncate
from tools.transactions import (
    TREND_DECREASE,
    TREND_INCREASE,
    TREND_STABLE,
    category_comparisons,
    latest_balance,
    monthly_spending,
    spending_by_category,
    spending_by_owner,
    top_places,
)
from logger import get_logger

logger = get_logger()

_TREND_ARROWS = {TREND_INCREASE: "↑", TREND_DECREASE: "↓", TREND_STABLE: "="}


def cmd_summary(args, services):
    """Print the dashboard's spending breakdowns for the committed ledger.

    Args:
        args: Parsed command-line arguments with optional month (YYYY-MM)
        services: Services container with transactions service
    """
    if args.month:
        try:
            reference = datetime.strptime(args.month, "%Y-%m").date()
        except ValueError:
            logger.error(f"Invalid month format: {args.month}. Expected YYYY-MM")
            sys.exit(1)
    else:
        reference = date.today()

    transactions = services.transactions.find_all()
    if not transactions:
        logger.info("No committed transactions yet.")
        return

    logger.info(f"\nTransactions: {len(transactions)}")
    logger.info(f"Latest balance: {format_brl(latest_balance(transactions))}")

    logger.info("\nSpending by owner:")
    logger.info("=" * 60)
    for owner, total in spending_by_owner(transactions).items():
        logger.info(f"{owner:<20} {format_brl(total):>20}")

    logger.info("\nSpending by category:")
    logger.info("=" * 60)
    for category, total in spending_by_category(transactions):
        logger.info(f"{category:<20} {format_brl(total):>20}")

    logger.info("\nTop places:")
    logger.info("=" * 60)
    for place in top_places(transactions):
        logger.info(
            f"{truncate(place['name'], 30):<30} {place['count']:>4}x "
            f"{format_brl(place['total']):>20}"
        )

    logger.info("\nMonthly spending:")
    logger.info("=" * 60)
    for month, totals in monthly_spending(transactions).items():
        per_owner = "  ".join(f"{o}: {format_brl(v)}" for o, v in totals.items())
        logger.info(f"{month}  {per_owner}")

    comparisons = category_comparisons(transactions, today=reference)
    logger.info(f"\nCategory comparison for {reference:%Y-%m}:")
    logger.info("=" * 100)
    if not comparisons:
        logger.info("No spending in the compared months.")
        return
    logger.info(
        f"{'Category':<14} {'Current':>16} {'Previous':>16} {'':>8} "
        f"{'6 months ago':>16} {'':>8}"
    )
    for c in comparisons:
        logger.info(
            f"{c['category']:<14} {format_brl(c['current']):>16} "
            f"{format_brl(c['previous']):>16} "
            f"{_TREND_ARROWS[c['trend_previous']]}{format_percent(c['change_previous']):>7} "
            f"{format_brl(c['six_months_ago']):>16} "
            f"{_TREND_ARROWS[c['trend_six_months']]}{format_percent(c['change_six_months']):>7}"
        )


def setup_parser(subparsers):
    """Setup reports subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "reports",
        help="Spending summaries",
        description="Spending breakdowns of the committed ledger",
    )

    reports_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available report commands",
        dest="subcommand",
        required=True,
    )

    summary_parser = reports_subparsers.add_parser(
        "summary",
        help="Spending by owner, category, place and month",
    )
    summary_parser.add_argument(
        "--month",
        help="Reference month for the category comparison, YYYY-MM (default: current)",
    )
    summary_parser.set_defaults(func=cmd_summary)
