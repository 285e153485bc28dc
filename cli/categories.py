#!/usr/bin/env python3

from categorization import CATEGORY_KEYWORDS
from models.category import CATEGORIES, DEFAULT_CATEGORY
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List the categories and, optionally, their matching keywords."""
    keywords = dict(CATEGORY_KEYWORDS)

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for name in CATEGORIES:
        suffix = " (default)" if name == DEFAULT_CATEGORY else ""
        logger.info(f"{name}{suffix}")
        if args.keywords and name in keywords:
            logger.info(f"  {', '.join(keywords[name])}")

    logger.info(f"\nTotal categories: {len(CATEGORIES)}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="List categories",
        description="Show the fixed category set used by auto-categorization",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.add_argument(
        "--keywords",
        action="store_true",
        help="Also show the description keywords mapped to each category",
    )
    list_parser.set_defaults(func=cmd_list)
