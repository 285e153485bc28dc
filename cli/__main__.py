#!/usr/bin/env python3
"""
Painel CLI: household finance ledger for Daniela and Giovani.

Usage:
    python -m cli <command> <subcommand> [options]

A statement import never goes straight to the ledger. It is parsed,
categorized and kept as a pending batch until it is reviewed and committed.

Typical session:
    python -m cli migrate apply
    python -m cli transactions ingest extrato.csv --owner Daniela
    python -m cli review list
    python -m cli review edit 3f2a9c description "Padaria Real"
    python -m cli review commit
    python -m cli reports summary --month 2024-03
"""

import sys
import argparse
from cli import categories, investments, migrate, reports, review, transactions
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging

COMMANDS = (transactions, review, reports, investments, categories, migrate)

# Commands that work on the raw database instead of the services
RAW_DB_COMMANDS = {"migrate"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cli",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True,
    )
    for command in COMMANDS:
        command.setup_parser(subparsers)

    return parser


def main(argv=None):
    """Parse arguments and dispatch to the chosen command."""
    args = build_parser().parse_args(argv)

    if not hasattr(args, "func"):
        build_parser().print_help()
        sys.exit(1)

    try:
        config = load_config()
        setup_logging(config)

        if args.command in RAW_DB_COMMANDS:
            args.func(args, DatabaseManager(config))
        else:
            args.func(args, Services(config))
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
