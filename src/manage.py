"""Storefront management CLI.

Usage:
    python src/manage.py setup-db              # Create all tables
    python src/manage.py drop-db               # Drop all tables
    python src/manage.py recalculate-ratings   # Rebuild product rating averages
    python src/manage.py create-admin --name "Ops" --email ops@example.com
"""

import argparse
import sys


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    print("Creating storefront database schema...")
    setup_db(_domain())
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    print("Dropping storefront database schema...")
    drop_db(_domain())
    print("Done.")


def recalculate_ratings():
    from storefront.catalogue.rating import recalculate_all_ratings

    storefront = _domain()
    with storefront.domain_context():
        changed = recalculate_all_ratings()
    print(f"Recalculated ratings, {changed} product(s) updated.")


def create_admin(name, email):
    from protean.utils.globals import current_domain

    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User, UserRole

    storefront = _domain()
    with storefront.domain_context():
        user_id = current_domain.process(
            RegisterUser(name=name, email=email, role=UserRole.ADMIN.value),
            asynchronous=False,
        )
        token = current_domain.repository_for(User).get(user_id).api_token
    print(f"Admin {email} created. API token: {token}")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("recalculate-ratings", help="Recompute every product's average rating")

    admin_parser = subparsers.add_parser("create-admin", help="Register an administrator and print its token")
    admin_parser.add_argument("--name", required=True)
    admin_parser.add_argument("--email", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "recalculate-ratings":
        recalculate_ratings()
    elif args.command == "create-admin":
        create_admin(args.name, args.email)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
