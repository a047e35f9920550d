"""Checkout service database management CLI.

Creates and drops the SQL schemas of the ordering and inventory domains.
Only SQL-backed providers (sqlite, postgresql) are touched; the in-memory
development configuration needs no setup.

Usage:
    python src/manage.py setup-db                     # Create all tables
    python src/manage.py drop-db --domain inventory   # Drop one domain's tables
"""

import argparse
import sys

from shared.db import drop_db, setup_db

DOMAIN_NAMES = ["ordering", "inventory"]


def _domains(names=None):
    from inventory.domain import inventory
    from ordering.domain import ordering

    all_domains = {"ordering": ordering, "inventory": inventory}
    return {name: all_domains[name] for name in (names or DOMAIN_NAMES)}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Checkout service database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
