"""
Pricing Engine - bundle discount arithmetic for checkout requests.

All amounts are integers in the smallest currency unit, so there is no
rounding anywhere in the calculation.
"""
from typing import Iterable, Mapping, Optional

from .models import CheckoutResult, DiscountRule, Item, Subtotal


def calculate_discounted_total(
    quantity: int,
    unit_price: int,
    discount_rule: Optional[DiscountRule] = None,
) -> int:
    """
    Calculate the price of `quantity` units, applying any bundle discount.

    Every complete group of `threshold_quantity` units costs `bundle_price`;
    leftover units are charged at the unit price.

    Args:
        quantity: Number of units requested
        unit_price: Price of one unit
        discount_rule: Optional bundle rule for the item

    Returns:
        The subtotal for the line
    """
    if discount_rule is None:
        return quantity * unit_price

    bundles, remainder = divmod(quantity, discount_rule.threshold_quantity)
    return bundles * discount_rule.bundle_price + remainder * unit_price


class PricingEngine:
    """
    Prices catalogue items against requested quantities.

    Stateless; a single instance can be shared by every request.
    """

    def price_item(self, item: Item, quantity: int) -> Subtotal:
        """Price one catalogue item."""
        return Subtotal(
            code=item.code,
            quantity=quantity,
            subtotal=calculate_discounted_total(quantity, item.unit_price, item.discount_rule),
        )

    def price(self, items: Iterable[Item], quantities: Mapping[str, int]) -> CheckoutResult:
        """
        Price every item and total the result.

        Args:
            items: Catalogue entries, in the order lines should be reported
            quantities: Requested quantity per code

        Returns:
            CheckoutResult with one subtotal per item
        """
        result = CheckoutResult()
        for item in items:
            result.add(self.price_item(item, quantities.get(item.code, 0)))
        return result
