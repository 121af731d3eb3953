"""
One-time import of the bundled vendor catalog into the vendors table.

    python scripts/seed_vendors.py [--fixture PATH] [--force]

A data_migrations marker makes reruns no-ops unless --force is given.
"""

import argparse
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from journeyapi.config import settings
from journeyapi.database.session import get_db_context
from journeyapi.logging_config import setup_logging
from journeyapi.providers.vendor_catalog import import_fixture_catalog


def main():
    parser = argparse.ArgumentParser(description="Import the vendor catalog")
    parser.add_argument("--fixture", default=settings.VENDOR_FIXTURE_PATH)
    parser.add_argument("--force", action="store_true", help="re-import even if already applied")
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL)
    with get_db_context() as db:
        count = import_fixture_catalog(db, path=args.fixture, force=args.force)

    if count:
        print(f"Imported {count} vendors")
    else:
        print("Vendor catalog already imported (use --force to re-run)")


if __name__ == "__main__":
    main()
