"""
Catalogue Builder - creates the catalogue tables and loads the seed data.

Seeding is idempotent: existing products are kept and existing offers have
their bundle price refreshed from the seed files.
"""
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.errors import CatalogueSetupError
from ..logging_config import get_logger
from .catalogue import connect


logger = get_logger(__name__)

SCHEMA = (
    "CREATE TABLE IF NOT EXISTS product ("
    "item_code TEXT PRIMARY KEY NOT NULL, "
    "unit_price INTEGER NOT NULL CHECK (unit_price >= 0))",
    "CREATE TABLE IF NOT EXISTS offers ("
    "item_code TEXT PRIMARY KEY NOT NULL REFERENCES product(item_code), "
    "discount_quantity INTEGER NOT NULL CHECK (discount_quantity > 0), "
    "discount_price INTEGER NOT NULL CHECK (discount_price >= 0))",
)

INSERT_PRODUCT = (
    "INSERT INTO product (item_code, unit_price) VALUES (?, ?) "
    "ON CONFLICT(item_code) DO NOTHING"
)
UPSERT_OFFER = (
    "INSERT INTO offers (item_code, discount_quantity, discount_price) VALUES (?, ?, ?) "
    "ON CONFLICT(item_code) DO UPDATE SET "
    "discount_quantity = excluded.discount_quantity, discount_price = excluded.discount_price"
)


def _read_seed(path: Path, columns: list[str]) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str)
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} is missing columns: {', '.join(missing)}")
    df['item_code'] = df['item_code'].str.strip()
    return df.dropna(subset=['item_code'])[columns]


def setup(connection: sqlite3.Connection, seed_dir: Optional[Path] = None) -> dict:
    """
    Create the catalogue tables and insert the seed products and offers.

    Args:
        connection: Open SQLite connection
        seed_dir: Directory holding products.csv and offers.csv

    Returns:
        Build report dictionary

    Raises:
        CatalogueSetupError: if the schema or seed data cannot be applied
    """
    seed_dir = Path(seed_dir or get_settings().seed_dir)
    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "metrics": {},
    }

    try:
        products = _read_seed(seed_dir / 'products.csv', ['item_code', 'unit_price'])
        offers = _read_seed(seed_dir / 'offers.csv', ['item_code', 'discount_quantity', 'discount_price'])

        with connection:
            for statement in SCHEMA:
                connection.execute(statement)
            connection.executemany(
                INSERT_PRODUCT,
                [(code, int(price)) for code, price in products.itertuples(index=False)],
            )
            connection.executemany(
                UPSERT_OFFER,
                [(code, int(qty), int(price)) for code, qty, price in offers.itertuples(index=False)],
            )
    except (OSError, ValueError, sqlite3.Error) as e:
        raise CatalogueSetupError(f"Catalogue setup failed: {e}") from e

    report["status"] = "success"
    report["metrics"]["seed_products"] = len(products)
    report["metrics"]["seed_offers"] = len(offers)
    logger.info("catalogue seeded", **report["metrics"])
    return report


def build_catalogue(settings: Optional[Settings] = None) -> dict:
    """Seed the configured database file."""
    settings = settings or get_settings()
    connection = connect(settings.database_path)
    try:
        return setup(connection, settings.seed_dir)
    finally:
        connection.close()
