#!/usr/bin/env python
"""
Build pipeline - creates and seeds the catalogue database.

Usage:
    CHECKOUT_DB_PATH=./db.sqlite python scripts/build_catalogue.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from checkout_pricing.config.settings import get_settings
from checkout_pricing.data.build_catalogue import build_catalogue
from checkout_pricing.data.catalogue import SqliteCatalogue, connect
from checkout_pricing.engine.errors import CatalogueSetupError
from checkout_pricing.logging_config import configure_logging


def main():
    settings = get_settings()
    configure_logging(settings)

    print("=" * 60)
    print("CHECKOUT CATALOGUE BUILD")
    print("=" * 60)
    print(f"Database: {settings.database_path}")
    print()

    try:
        report = build_catalogue(settings)
    except CatalogueSetupError as e:
        print(f"\n❌ BUILD FAILED: {e}")
        sys.exit(1)

    connection = connect(settings.database_path)
    try:
        items = SqliteCatalogue(connection).all_items()
    finally:
        connection.close()

    print(f"Seed products: {report['metrics']['seed_products']}")
    print(f"Seed offers:   {report['metrics']['seed_offers']}")
    print()
    print("Catalogue:")
    for item in items:
        rule = item.discount_rule
        offer = f"{rule.threshold_quantity} for {rule.bundle_price}" if rule else "-"
        print(f"  {item.code:<6} {item.unit_price:>6}   {offer}")
    print()
    print("✅ BUILD COMPLETE")


if __name__ == "__main__":
    main()
