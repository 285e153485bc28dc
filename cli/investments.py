#!/usr/bin/env python3

import sys
from decimal import Decimal
from cli.helpers import format_brl, truncate
from errors import StoreError
from models.investment import INVESTMENT_KINDS
from models.transaction import OWNERS, parse_number
from tools.investments import PROJECTION_YEARS, investment_summary
from logger import get_logger

logger = get_logger()


def cmd_add(args, services):
    """Record a new investment.

    Args:
        args: Parsed command-line arguments
        services: Services container with investments service
    """
    amount = parse_number(args.amount)
    if amount is None:
        logger.error(f"Amount must be numeric, got '{args.amount}'")
        sys.exit(1)

    rate = parse_number(args.rate)
    if rate is None:
        logger.error(f"Rate must be numeric, got '{args.rate}'")
        sys.exit(1)

    try:
        investment = services.investments.create(
            owner=args.owner,
            kind=args.kind,
            amount=amount,
            annual_rate=rate,
            title=args.title,
            investment_date=args.date,
        )
    except ValueError as e:
        logger.error(f"Error adding investment: {e}")
        sys.exit(1)
    except StoreError as e:
        logger.error(f"Could not save investment: {e}")
        sys.exit(1)

    logger.info(f"\n✓ Investment added with ID: {investment.id}")
    logger.info(f"  {investment.owner} - {investment.kind}: {format_brl(investment.amount)}")
    logger.info(f"  Expected return: {investment.annual_rate}% a year")


def cmd_list(args, services):
    """List investments with compound-interest projections."""
    if args.owner:
        investments = services.investments.find_by_owner(args.owner)
    else:
        investments = services.investments.find_all()

    if not investments:
        logger.info("No investments found.")
        return

    summary = investment_summary(investments)

    logger.info("\nInvestments:")
    logger.info("=" * 120)
    header = "  ".join(f"{f'{y} year(s)':>16}" for y in PROJECTION_YEARS)
    logger.info(
        f"{'Date':<10}  {'Owner':<8}  {'Kind':<14}  {'Title':<20}  "
        f"{'Amount':>16}  {'Rate':>7}  {header}"
    )
    for inv in investments:
        projections = summary["projections"][inv.id]
        values = "  ".join(
            f"{format_brl(projections[y]['value']):>16}" for y in PROJECTION_YEARS
        )
        logger.info(
            f"{inv.date:<10}  {inv.owner:<8}  {truncate(inv.kind, 14):<14}  "
            f"{truncate(inv.title or '', 20):<20}  {format_brl(inv.amount):>16}  "
            f"{inv.annual_rate:>6}%  {values}"
        )
    logger.info("-" * 120)

    for owner, total in summary["by_owner"].items():
        if args.owner and owner != args.owner:
            continue
        logger.info(f"Total {owner}: {format_brl(total)}")
    logger.info(f"Total invested: {format_brl(summary['total'])}")


def setup_parser(subparsers):
    """Setup investments subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "investments",
        help="Track investments",
        description="Record investments and project their returns",
    )

    investments_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available investment commands",
        dest="subcommand",
        required=True,
    )

    add_parser = investments_subparsers.add_parser("add", help="Add an investment")
    add_parser.add_argument("--owner", required=True, choices=OWNERS)
    add_parser.add_argument(
        "--kind",
        required=True,
        help=f"Investment type, e.g. {', '.join(INVESTMENT_KINDS)}",
    )
    add_parser.add_argument("--title", help="Optional title")
    add_parser.add_argument("--amount", required=True, help="Invested amount")
    add_parser.add_argument("--date", help="Investment date, YYYY-MM-DD (default: today)")
    add_parser.add_argument(
        "--rate",
        default=Decimal("10"),
        help="Expected yearly return in percent (default: 10)",
    )
    add_parser.set_defaults(func=cmd_add)

    list_parser = investments_subparsers.add_parser(
        "list", help="List investments with projections"
    )
    list_parser.add_argument("--owner", choices=OWNERS, help="Only this owner")
    list_parser.set_defaults(func=cmd_list)
