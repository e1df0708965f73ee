"""Kitchenline database management CLI.

Provides commands to create and drop the ordering database schema, and to
seed menu items for local development.

Usage:
    python src/manage.py setup-db                  # Create all tables
    python src/manage.py drop-db                   # Drop all tables
    python src/manage.py seed-menu menu.json       # Load menu items from JSON
"""

import argparse
import json
import sys


def setup_database():
    """Create the ordering database schema."""
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating ordering database schema...")
    setup_db(ordering)
    print("Done.")


def drop_database():
    """Drop the ordering database schema."""
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping ordering database schema...")
    drop_db(ordering)
    print("Done.")


def seed_menu(path):
    """Load menu items from a JSON list of {id?, chef_id, name, price, available?}."""
    from ordering.domain import ordering
    from ordering.menu.menu_item import MenuItem

    with open(path) as fh:
        entries = json.load(fh)

    ordering.init()
    with ordering.domain_context():
        repo = ordering.repository_for(MenuItem)
        for entry in entries:
            repo.add(MenuItem(**entry))
            print(f"  {entry.get('name')} ({entry.get('price')})")

    print(f"Seeded {len(entries)} menu items.")


def main():
    parser = argparse.ArgumentParser(description="Kitchenline database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-menu", help="Load menu items from a JSON file")
    seed_parser.add_argument("path", help="Path to a JSON list of menu items")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-menu":
        seed_menu(args.path)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
