"""
Catalogue access - unit prices and bundle offers keyed by item code.

The checkout service depends only on the `Catalogue` protocol, so the
SQLite store can be swapped for an in-memory one in tests.
"""
import sqlite3
from pathlib import Path
from typing import Iterable, Optional, Protocol, runtime_checkable

import pandas as pd

from ..engine.models import DiscountRule, Item


LOOKUP_SQL = """
    SELECT product.item_code, product.unit_price,
           offers.discount_quantity, offers.discount_price
    FROM product
    LEFT JOIN offers ON product.item_code = offers.item_code
    {where}
    ORDER BY product.item_code
"""


@runtime_checkable
class Catalogue(Protocol):
    """Interface for catalogue queries."""

    def lookup(self, codes: Iterable[str]) -> list[Item]:
        """Return one Item per distinct known code; unknown codes are omitted."""
        ...

    def all_items(self) -> list[Item]:
        """Return every item in the catalogue."""
        ...


def connect(path: Path) -> sqlite3.Connection:
    """Open the catalogue database, creating its directory if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Shared by the server's worker threads; request handling only reads
    return sqlite3.connect(str(path), check_same_thread=False)


def _row_to_item(row) -> Item:
    rule = None
    if pd.notna(row.discount_quantity) and pd.notna(row.discount_price):
        rule = DiscountRule(
            threshold_quantity=int(row.discount_quantity),
            bundle_price=int(row.discount_price),
        )
    return Item(code=str(row.item_code), unit_price=int(row.unit_price), discount_rule=rule)


class SqliteCatalogue:
    """Catalogue backed by the `product` and `offers` tables."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def _query(self, where: str = "", params: Optional[list] = None) -> list[Item]:
        df = pd.read_sql_query(LOOKUP_SQL.format(where=where), self.connection, params=params)
        return [_row_to_item(row) for row in df.itertuples(index=False)]

    def lookup(self, codes: Iterable[str]) -> list[Item]:
        unique = list(dict.fromkeys(codes))
        if not unique:
            return []
        placeholders = ",".join("?" for _ in unique)
        return self._query(f"WHERE product.item_code IN ({placeholders})", unique)

    def all_items(self) -> list[Item]:
        return self._query()


class InMemoryCatalogue:
    """Catalogue held in a dict; used by tests and embedded callers."""

    def __init__(self, items: Iterable[Item] = ()):
        self._items = {item.code: item for item in items}

    def lookup(self, codes: Iterable[str]) -> list[Item]:
        wanted = set(codes)
        return [self._items[code] for code in sorted(wanted) if code in self._items]

    def all_items(self) -> list[Item]:
        return [self._items[code] for code in sorted(self._items)]
