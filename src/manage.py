"""Storefront management CLI.

Creates and drops the relational schema of every bounded context and seeds
the catalog.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Insert the initial products if the catalog is empty
"""

import argparse
import sys

DOMAIN_NAMES = ["identity", "catalogue", "ordering"]

# Domain.init() resets providers: initialize each domain once per process.
_initialized: set[str] = set()


def _domains(names=None):
    """Return the requested domains, initializing each on first use."""
    from catalogue.domain import catalogue
    from identity.domain import identity
    from ordering.domain import ordering

    all_domains = {"identity": identity, "catalogue": catalogue, "ordering": ordering}
    selected = {name: all_domains[name] for name in (names or DOMAIN_NAMES)}
    for name, domain in selected.items():
        if name not in _initialized:
            domain.init()
            _initialized.add(name)
    return selected


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _domains(domains).items():
        providers = setup_db(domain)
        if providers:
            print(f"  {name} schema ready ({', '.join(providers)}).")
        else:
            print(f"  {name} uses no relational database; nothing to create.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _domains(domains).items():
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def seed():
    """Seed the catalog with the initial products."""
    from catalogue.product.seeding import seed_catalogue

    catalogue = _domains(["catalogue"])["catalogue"]
    with catalogue.domain_context():
        inserted = seed_catalogue(source="manage")
    print(f"Inserted {inserted} products." if inserted else "Catalog already populated.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront management")
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

    subparsers.add_parser("seed", help="Insert the initial catalog")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed":
        seed()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
