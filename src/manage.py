"""Marketplace management CLI.

Usage:
    python src/manage.py setup-db         # Create all tables
    python src/manage.py drop-db          # Drop all tables
    python src/manage.py seed             # Add sample accounts and products
    python src/manage.py seed --fresh     # Drop and recreate tables first
"""

import argparse
import sys

from marketplace.utils.seed import SAMPLE_ACCOUNTS


def _domain():
    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


def setup_database():
    from marketplace.utils.db import setup_db

    domain = _domain()
    print("Creating marketplace database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from marketplace.utils.db import drop_db

    domain = _domain()
    print("Dropping marketplace database schema...")
    drop_db(domain)
    print("Done.")


def seed_database(fresh=False):
    from marketplace.utils.db import drop_db, setup_db
    from marketplace.utils.seed import seed_data

    domain = _domain()
    if fresh:
        print("Clearing existing data...")
        drop_db(domain)
        setup_db(domain)

    with domain.domain_context():
        created = seed_data()

    print(f"Created {len(created['users'])} users and {len(created['products'])} products")
    print("\nTest Accounts:")
    for account in SAMPLE_ACCOUNTS:
        print(f"  {account['role'].title()}: {account['email']} / {account['password']}")


def main():
    parser = argparse.ArgumentParser(description="Marketplace management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Add sample accounts and products")
    seed_parser.add_argument("--fresh", action="store_true", help="Drop and recreate tables before seeding")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_database(fresh=args.fresh)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
