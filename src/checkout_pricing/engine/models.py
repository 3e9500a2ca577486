"""
Data models for the checkout pricing engine.

Catalogue entries are frozen; results are plain dataclasses that the API
serialises with jsonable_encoder.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class DiscountRule:
    """Every complete group of `threshold_quantity` units costs `bundle_price`."""
    threshold_quantity: int
    bundle_price: int

    def __post_init__(self):
        if self.threshold_quantity < 1:
            raise ValueError(f"threshold_quantity must be >= 1, got {self.threshold_quantity}")
        if self.bundle_price < 0:
            raise ValueError(f"bundle_price must be >= 0, got {self.bundle_price}")


@dataclass(frozen=True)
class Item:
    """A catalogue entry. Prices are integers in the smallest currency unit."""
    code: str
    unit_price: int
    discount_rule: Optional[DiscountRule] = None

    def __post_init__(self):
        if self.unit_price < 0:
            raise ValueError(f"unit_price must be >= 0, got {self.unit_price}")

    def to_dict(self) -> dict:
        rule = self.discount_rule
        return {
            "code": self.code,
            "unit_price": self.unit_price,
            "discount": None if rule is None else {
                "quantity": rule.threshold_quantity,
                "price": rule.bundle_price,
            },
        }


@dataclass(frozen=True)
class LineItemRequest:
    """One validated (code, quantity) pair from a checkout request."""
    code: str
    quantity: int


@dataclass
class Subtotal:
    """Price charged for all requested units of one code."""
    code: str
    quantity: int
    subtotal: int


@dataclass
class CheckoutResult:
    """Complete result of a checkout calculation."""
    subtotals: list[Subtotal] = field(default_factory=list)
    total: int = 0

    def add(self, line: Subtotal):
        """Append a line and keep the total in step."""
        self.subtotals.append(line)
        self.total += line.subtotal
